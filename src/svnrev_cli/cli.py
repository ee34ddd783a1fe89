from __future__ import annotations

from typing import Optional

import typer

from svnrev_core import __version__

app = typer.Typer(help="svnrev: summarize the revision state of a Subversion working copy")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"svnrev {__version__}")
        raise typer.Exit()


@app.callback()
def _init(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_print_version, is_eager=True, help="Show the svnrev version and exit",
    ),
):
    pass


# Subcommands are registered in commands/*.py
from .commands import config_cmd  # noqa: E402
from .commands.doctor import doctor as doctor_fn  # noqa: E402
from .commands.show import show as show_fn  # noqa: E402

app.command(name="show")(show_fn)
app.add_typer(config_cmd.app, name="config", help="Configuration inspection and validation")
app.command(name="doctor")(doctor_fn)


def main():
    app()
