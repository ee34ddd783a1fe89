"""
doctor.py - Environment health check command.

Checks prerequisites, configuration and the svnversion executable.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from svnrev_core.config import SvnrevSettings, build_overrides, load_config, validate_config
from svnrev_core.errors import ConfigError, ToolLaunchError
from svnrev_core.vcs.invoker import launch_tool
from svnrev_core.vcs.resolver import resolve_executable

console = Console()


@dataclass
class CheckResult:
    """Result of a single check."""
    name: str
    passed: bool
    message: str
    details: Optional[str] = None


@dataclass
class DoctorResult:
    """Overall doctor check result."""
    all_passed: bool
    checks: List[CheckResult]


def check_python_prereqs() -> CheckResult:
    """Check that required Python packages are installed."""
    missing = []
    packages = [
        ("pydantic", "pydantic"),
        ("typer", "typer"),
        ("rich", "rich"),
        ("tomli_w", "tomli-w"),
    ]

    for import_name, pip_name in packages:
        try:
            __import__(import_name)
        except ImportError:
            missing.append(pip_name)

    if missing:
        return CheckResult(
            name="Python Prerequisites",
            passed=False,
            message=f"Missing packages: {', '.join(missing)}",
            details=f"Install with: pip install {' '.join(missing)}",
        )

    return CheckResult(
        name="Python Prerequisites",
        passed=True,
        message="All required packages installed",
    )


def check_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict] = None,
) -> tuple[CheckResult, Optional[SvnrevSettings]]:
    """Check that the effective configuration loads and validates."""
    try:
        effective = load_config(config_path=config_path, overrides=overrides)
    except ConfigError as exc:
        return CheckResult(
            name="Configuration",
            passed=False,
            message="Config file could not be loaded",
            details=str(exc),
        ), None

    errors = validate_config(effective)
    if errors:
        return CheckResult(
            name="Configuration",
            passed=False,
            message=f"{len(errors)} config error(s)",
            details="\n".join(errors),
        ), None

    return CheckResult(
        name="Configuration",
        passed=True,
        message="Config is valid",
    ), SvnrevSettings.model_validate(effective)


def check_svnversion(settings: Optional[SvnrevSettings]) -> CheckResult:
    """Check that the configured svnversion executable can be launched."""
    settings = settings or SvnrevSettings()
    executable = resolve_executable(
        settings.tool.install_root or None,
        settings.tool.executable or None,
    )
    try:
        result = launch_tool([executable, "--version", "--quiet"])
    except ToolLaunchError as exc:
        return CheckResult(
            name="svnversion",
            passed=False,
            message=f"Cannot launch {executable}",
            details=(
                f"{exc}. Install Subversion command-line tools or set "
                "[tool].install_root / SVNREV_INSTALL_ROOT."
            ),
        )

    if result.returncode != 0:
        return CheckResult(
            name="svnversion",
            passed=False,
            message=f"{executable} exited with status {result.returncode}",
            details=(result.stderr or result.stdout).strip() or None,
        )

    version = result.stdout.strip() or "unknown version"
    return CheckResult(
        name="svnversion",
        passed=True,
        message=f"{executable} ({version})",
    )


def run_doctor(
    config_path: Optional[Path] = None,
    install_root: Optional[str] = None,
    executable: Optional[str] = None,
) -> DoctorResult:
    """Run all doctor checks."""
    config_check, settings = check_config(
        config_path,
        build_overrides(install_root=install_root, executable=executable),
    )
    checks = [
        check_python_prereqs(),
        config_check,
        check_svnversion(settings),
    ]

    all_passed = all(c.passed for c in checks)
    return DoctorResult(all_passed=all_passed, checks=checks)


def format_result_plain(result: DoctorResult) -> None:
    """Print result in plain text format."""
    table = Table(title="svnrev doctor", show_header=True)
    table.add_column("Check", style="bold")
    table.add_column("Status")
    table.add_column("Message")

    for check in result.checks:
        status = "[green]✓ PASS[/green]" if check.passed else "[red]✗ FAIL[/red]"
        table.add_row(check.name, status, escape(check.message))
        if check.details:
            table.add_row("", "", f"[dim]{escape(check.details)}[/dim]")

    console.print(table)

    if result.all_passed:
        console.print("\n[green bold]All checks passed![/green bold]")
    else:
        console.print("\n[red bold]Some checks failed.[/red bold]")


def format_result_json(result: DoctorResult) -> None:
    """Print result in JSON format."""
    output = {
        "all_passed": result.all_passed,
        "checks": [asdict(c) for c in result.checks],
    }
    typer.echo(json.dumps(output, indent=2))


def doctor(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (TOML or JSON)"),
    install_root: Optional[str] = typer.Option(
        None, "--install-root",
        help="Directory containing the svnversion executable",
    ),
    executable: Optional[str] = typer.Option(None, "--executable", help="Executable file name"),
    format: str = typer.Option(
        "plain", "--format", "-f",
        help="Output format: plain, json",
    ),
) -> None:
    """
    Check environment health.

    Verifies:
    - Python prerequisites are installed
    - Configuration loads and validates
    - svnversion can be launched
    """
    result = run_doctor(config_path=config, install_root=install_root, executable=executable)

    if format == "json":
        format_result_json(result)
    else:
        format_result_plain(result)

    raise typer.Exit(0 if result.all_passed else 1)
