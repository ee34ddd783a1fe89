"""Locate the svnversion executable from configured settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

WINDOWS_EXECUTABLE = "svnversion.exe"
POSIX_EXECUTABLE = "svnversion"


def default_executable_name() -> str:
    return WINDOWS_EXECUTABLE if os.name == "nt" else POSIX_EXECUTABLE


def resolve_executable(
    install_root: Optional[Union[str, Path]] = None,
    executable: Optional[str] = None,
) -> str:
    """
    Join the install root and executable name into the path to launch.

    Without an install root the bare name is returned and left to the
    process launcher.
    """
    name = (executable or "").strip() or default_executable_name()
    root = str(install_root).strip() if install_root is not None else ""
    if not root:
        return name
    return str(Path(root).expanduser() / name)
