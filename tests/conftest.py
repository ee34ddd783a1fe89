import logging
import os
import stat
from pathlib import Path
from typing import Callable

import pytest
from hypothesis import settings

from svnrev_cli.logging_setup import PACKAGE_LOGGERS

# Prevent Hypothesis from writing a local example database (e.g. `.hypothesis/`) during tests.
settings.register_profile("svnrev-tests", database=None)
settings.load_profile("svnrev-tests")


@pytest.fixture(autouse=True)
def _restore_package_loggers():
    """Undo handler, level and propagation changes made by CLI runs."""
    saved = {}
    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        saved[name] = (logger.level, list(logger.handlers), logger.propagate)
    yield
    for name, (level, handlers, propagate) in saved.items():
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers = handlers
        logger.propagate = propagate


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SVNREV_CONFIG_PATH",
        "SVNREV_INSTALL_ROOT",
        "SVNREV_EXECUTABLE",
        "SVNREV_LEGACY_LOW",
        "SVNREV_LOG_VERBOSITY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_svnversion(tmp_path: Path) -> Callable[..., Path]:
    """Write a stand-in svnversion script and return its install root.

    stdout and stderr are printf formats, so octal escapes such as \\377 emit raw bytes.
    """

    def _make(stdout: str = "", stderr: str = "", exit_code: int = 0, name: str = "svnversion") -> Path:
        root = tmp_path / "svn" / "bin"
        root.mkdir(parents=True, exist_ok=True)
        script = root / name
        lines = ["#!/bin/sh"]
        if stdout:
            lines.append(f"printf '{stdout}'")
        if stderr:
            lines.append(f"printf '{stderr}\\n' >&2")
        lines.append(f"exit {exit_code}")
        script.write_text("\n".join(lines) + "\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return root

    return _make
