"""Revision query and summary types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from ..errors import MissingInputError

NO_REVISION = -1


@dataclass(frozen=True)
class RevisionQuery:
    """A request to summarize one working copy."""

    local_path: Path

    @classmethod
    def from_path(cls, local_path: Optional[Union[str, Path]]) -> "RevisionQuery":
        """Build a query, rejecting a missing, empty or NUL-containing path."""
        if local_path is None or not str(local_path).strip():
            raise MissingInputError("local_path is required")
        if "\x00" in str(local_path):
            raise MissingInputError("local_path must not contain NUL characters")
        return cls(local_path=Path(local_path))

    def absolute_path(self) -> Path:
        return self.local_path.resolve()


@dataclass(frozen=True)
class RevisionSummary:
    """Revision state reported by svnversion for a working copy."""

    high_revision: int = NO_REVISION
    low_revision: int = NO_REVISION
    modifications: bool = False
    switched: bool = False
    exported: bool = False

    @property
    def revision(self) -> int:
        """Alias of the high revision."""
        return self.high_revision

    @property
    def is_range(self) -> bool:
        return self.low_revision != self.high_revision

    def to_properties(self) -> Dict[str, Union[int, bool]]:
        """Output properties in the order build hosts expect them."""
        return {
            "Revision": self.revision,
            "HighRevision": self.high_revision,
            "LowRevision": self.low_revision,
            "Modifications": self.modifications,
            "Switched": self.switched,
            "Exported": self.exported,
        }
