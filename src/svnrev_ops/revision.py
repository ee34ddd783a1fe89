"""
revision.py - Query a working copy and render its revision properties.

Used by the CLI and by build scripts that stamp artifacts with the source
revision.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from svnrev_core.config import OUTPUT_FORMATS, SvnrevSettings
from svnrev_core.vcs.base import RevisionQuery, RevisionSummary
from svnrev_core.vcs.invoker import SvnversionInvoker
from svnrev_core.vcs.parser import parse_output

logger = logging.getLogger(__name__)

ENV_NAMES = {
    "Revision": "SVN_REVISION",
    "HighRevision": "SVN_HIGH_REVISION",
    "LowRevision": "SVN_LOW_REVISION",
    "Modifications": "SVN_MODIFICATIONS",
    "Switched": "SVN_SWITCHED",
    "Exported": "SVN_EXPORTED",
}


def query_revision(
    local_path: Optional[Union[str, Path]],
    settings: Optional[SvnrevSettings] = None,
) -> RevisionSummary:
    """
    Run svnversion for local_path and parse the result.

    Raises MissingInputError before launching anything when local_path is
    empty; launch and execution failures propagate without a summary.
    """
    query = RevisionQuery.from_path(local_path)
    settings = settings or SvnrevSettings()
    invoker = SvnversionInvoker(
        install_root=settings.tool.install_root or None,
        executable=settings.tool.executable or None,
    )
    buffer = invoker.run(query)
    return parse_output(buffer, legacy_low=settings.parse.legacy_low)


def _format_value(value: Union[int, bool]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_summary(summary: RevisionSummary, fmt: str = "text") -> str:
    """Render the summary's output properties in the requested format."""
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format: {fmt} (expected one of {', '.join(OUTPUT_FORMATS)})")

    props = summary.to_properties()
    if fmt == "json":
        return json.dumps(props, indent=2)
    if fmt == "properties":
        return "\n".join(f"{name}={_format_value(value)}" for name, value in props.items())
    if fmt == "env":
        return "\n".join(f"{ENV_NAMES[name]}={_format_value(value)}" for name, value in props.items())

    width = max(len(name) for name in props)
    return "\n".join(f"{name + ':':<{width + 1}} {_format_value(value)}" for name, value in props.items())


def write_stamp(summary: RevisionSummary, out: Path, fmt: str = "properties") -> Path:
    """Write the rendered summary to out, creating parent directories."""
    content = render_summary(summary, fmt)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(content + "\n", encoding="utf-8")
    logger.debug(f"Wrote {fmt} revision stamp to {out}")
    return out
