"""Error types raised by svnrev."""

from __future__ import annotations

from typing import List, Optional


class SvnrevError(Exception):
    """Base class for svnrev failures."""


class MissingInputError(SvnrevError, ValueError):
    """A required input was not supplied."""


class ConfigError(SvnrevError):
    """Configuration could not be loaded or failed validation."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}:\n" + "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(message)


class ToolLaunchError(SvnrevError):
    """The svnversion executable could not be started."""

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Failed to launch '{command}': {reason}")


class ToolExecutionError(SvnrevError):
    """svnversion started but exited with a failure status."""

    def __init__(self, command: str, returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"'{command}' exited with status {returncode}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)
