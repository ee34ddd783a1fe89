"""Run svnversion against a working copy and capture its output."""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from ..errors import ToolExecutionError, ToolLaunchError
from .base import RevisionQuery
from .resolver import resolve_executable

logger = logging.getLogger(__name__)

NO_NEWLINE_FLAG = "--no-newline"

# Only CR/LF end a line; str.splitlines() would also eat form feeds etc.
LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split tool output into lines, dropping a trailing empty line."""
    lines = LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def launch_tool(command: List[str]) -> subprocess.CompletedProcess:
    """
    Run a tool to completion and capture its output as text.

    Undecodable bytes are replaced rather than raised.

    Raises:
        ToolLaunchError: The executable is missing or cannot be started.
    """
    command_line = shlex.join(command)
    try:
        return subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError as exc:
        raise ToolLaunchError(command_line, f"executable not found ({exc.strerror or exc})") from exc
    except PermissionError as exc:
        raise ToolLaunchError(command_line, f"permission denied ({exc.strerror or exc})") from exc
    except OSError as exc:
        raise ToolLaunchError(command_line, str(exc)) from exc
    except ValueError as exc:
        # subprocess rejects arguments with embedded NUL bytes.
        raise ToolLaunchError(command_line, str(exc)) from exc


class OutputBuffer:
    """Accumulates stdout lines for a single invocation."""

    def __init__(self) -> None:
        self._parts: List[str] = []

    def append(self, line: str) -> None:
        self._parts.append(line)

    def __len__(self) -> int:
        return len(self._parts)

    def snapshot(self) -> str:
        """Return the lines joined without separators."""
        return "".join(self._parts)


class SvnversionInvoker:
    """
    Launch svnversion for a local path.

    Each call to run() owns its own OutputBuffer, so one invoker can be
    shared between callers without mixing their output.
    """

    def __init__(
        self,
        install_root: Optional[Union[str, Path]] = None,
        executable: Optional[str] = None,
    ) -> None:
        self.executable_path = resolve_executable(install_root, executable)

    def build_command(self, query: RevisionQuery) -> List[str]:
        return [self.executable_path, NO_NEWLINE_FLAG, str(query.absolute_path())]

    def command_line(self, query: RevisionQuery) -> str:
        return shlex.join(self.build_command(query))

    def run(self, query: RevisionQuery) -> str:
        """
        Execute svnversion and return its captured standard output.

        Raises:
            ToolLaunchError: The executable is missing or cannot be started.
            ToolExecutionError: svnversion exited with a non-zero status.
        """
        command = self.build_command(query)
        command_line = shlex.join(command)
        logger.debug(f"Running: {command_line}")

        result = launch_tool(command)

        if result.returncode != 0:
            stderr = result.stderr or ""
            for line in split_lines(stderr):
                if line:
                    logger.error(line)
            raise ToolExecutionError(command_line, result.returncode, stderr)

        buffer = OutputBuffer()
        for line in split_lines(result.stdout or ""):
            logger.info(line)
            buffer.append(line)
        return buffer.snapshot()
