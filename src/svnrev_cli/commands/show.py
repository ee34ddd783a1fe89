"""
show.py - Print or stamp the revision summary of a working copy.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from svnrev_core.config import build_overrides, load_settings
from svnrev_core.errors import SvnrevError
from svnrev_ops.revision import query_revision, render_summary, write_stamp

from ..logging_setup import configure_logging

console = Console()
err_console = Console(stderr=True)


def show(
    path: str = typer.Argument(..., help="Working copy path to summarize"),
    format: Optional[str] = typer.Option(
        None, "--format", "-f",
        help="Output format: text|json|properties|env (default from config)",
    ),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write output to this file instead of stdout"),
    install_root: Optional[str] = typer.Option(
        None, "--install-root",
        help="Directory containing the svnversion executable",
    ),
    executable: Optional[str] = typer.Option(None, "--executable", help="Executable file name"),
    legacy_low: Optional[bool] = typer.Option(
        None, "--legacy-low/--no-legacy-low",
        help="Keep LowRevision at -1 the way older build tasks reported it",
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (TOML or JSON)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log svnversion output"),
    debug: bool = typer.Option(False, "--debug", help="Log command lines and parse results"),
) -> None:
    """Summarize the revision state of a working copy."""
    verbosity = "debug" if debug else ("info" if verbose else None)
    try:
        settings = load_settings(
            config_path=config,
            overrides=build_overrides(
                install_root=install_root,
                executable=executable,
                legacy_low=legacy_low,
                verbosity=verbosity,
                output_format=format,
            ),
        )
    except SvnrevError as exc:
        err_console.print(f"Error: {exc}", style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1)

    configure_logging(settings.log.verbosity)

    try:
        summary = query_revision(path, settings)
    except SvnrevError as exc:
        err_console.print(f"Error: {exc}", style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1)

    fmt = settings.output.format
    if out:
        target = write_stamp(summary, out, fmt)
        console.print(f"Revision stamp written to: {target}", style="green", markup=False, soft_wrap=True)
    else:
        typer.echo(render_summary(summary, fmt))
