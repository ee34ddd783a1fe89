"""Parse svnversion output into a RevisionSummary."""

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

from .base import NO_REVISION, RevisionSummary

logger = logging.getLogger(__name__)

# svnversion's compact form: "4168", "4168:4173", "4168:4173MS", "exported".
NUMBER_PATTERN = re.compile(r"[0-9]+")
MODIFIED_MARKER = "M"
SWITCHED_MARKER = "S"
EXPORTED_MARKER = "exported"

# Tokens that do not fit a signed 32-bit revision are dropped.
MAX_REVISION = 2**31 - 1


def _parse_token(token: str) -> Optional[int]:
    try:
        value = int(token)
    except ValueError:
        # int() refuses very long digit strings on newer interpreters.
        value = MAX_REVISION + 1
    if value > MAX_REVISION:
        logger.debug(f"Skipping out-of-range revision token: {token}")
        return None
    return value


def iter_revisions(buffer: str) -> Iterator[int]:
    """Yield every numeric token in order of appearance."""
    for match in NUMBER_PATTERN.finditer(buffer):
        value = _parse_token(match.group())
        if value is not None:
            yield value


def parse_output(buffer: str, *, legacy_low: bool = False) -> RevisionSummary:
    """
    Summarize captured svnversion output.

    Args:
        buffer: Concatenated standard output of svnversion.
        legacy_low: Fold every token against the -1 sentinel when computing
            the low revision, which keeps it at -1 for any non-negative
            revision. Matches older build tasks that reported it that way.

    Returns:
        RevisionSummary with revisions left at -1 when no token is found.
    """
    low = NO_REVISION
    high = NO_REVISION
    seen = False
    for revision in iter_revisions(buffer):
        if not seen and not legacy_low:
            low = high = revision
        else:
            low = min(low, revision)
            high = max(high, revision)
        seen = True

    exported = EXPORTED_MARKER in buffer
    summary = RevisionSummary(
        high_revision=high,
        low_revision=low,
        modifications=MODIFIED_MARKER in buffer,
        switched=SWITCHED_MARKER in buffer,
        exported=exported,
    )
    if exported:
        logger.warning("Local path is not a Subversion working copy")

    logger.debug(
        f"Revision: {summary.revision}; Low: {summary.low_revision}; "
        f"Modifications: {summary.modifications}; Switched: {summary.switched}; "
        f"Exported: {summary.exported}"
    )
    return summary
