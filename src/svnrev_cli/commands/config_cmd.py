from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import tomli_w
import typer

from svnrev_core.config import load_config, load_settings, validate_config
from svnrev_core.errors import ConfigError

app = typer.Typer(help="Configuration inspection and validation")


@app.command("show")
def config_show(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (TOML or JSON)"),
    format: str = typer.Option("json", "--format", "-f", help="Output format: json|toml"),
):
    """Print the effective merged config (defaults, file, environment)."""
    if format not in ("json", "toml"):
        typer.echo(f"Unsupported format: {format} (expected json or toml)", err=True)
        raise typer.Exit(2)
    try:
        settings = load_settings(config_path=config)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)

    data = settings.model_dump()
    if format == "toml":
        typer.echo(tomli_w.dumps(data), nl=False)
    else:
        typer.echo(json.dumps(data, indent=2))


@app.command("validate")
def config_validate(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (TOML or JSON)"),
):
    """Validate the effective config and report every problem found."""
    try:
        effective = load_config(config_path=config)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)

    errors = validate_config(effective)
    if errors:
        typer.echo("Config is invalid:")
        for err in errors:
            typer.echo(f"  - {err}")
        raise typer.Exit(1)
    typer.echo("Config is valid")
