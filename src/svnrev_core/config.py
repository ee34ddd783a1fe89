"""Layered configuration: defaults, config file, environment, CLI overrides."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from .errors import ConfigError

DEFAULT_CONFIG_FILENAME = "svnrev.toml"
CONFIG_PATH_ENV = "SVNREV_CONFIG_PATH"

DEFAULT_CONFIG: Dict[str, Any] = {
    "tool": {
        "install_root": "",
        "executable": "",
    },
    "parse": {
        "legacy_low": False,
    },
    "log": {
        "verbosity": "warning",
    },
    "output": {
        "format": "text",
    },
}

OUTPUT_FORMATS = ("text", "json", "properties", "env")


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ToolSettings(_Section):
    install_root: str = ""
    executable: str = ""


class ParseSettings(_Section):
    legacy_low: bool = False


class LogSettings(_Section):
    verbosity: Literal["debug", "info", "warning", "warn", "error", "off", "none", "disabled"] = "warning"

    @field_validator("verbosity", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class OutputSettings(_Section):
    format: Literal["text", "json", "properties", "env"] = "text"


class SvnrevSettings(_Section):
    """Validated effective configuration."""

    tool: ToolSettings = Field(default_factory=ToolSettings)
    parse: ParseSettings = Field(default_factory=ParseSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)


def default_config() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


def merge_defaults(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    if not config or not path:
        return default
    current: Any = config
    for segment in path.split("."):
        if not isinstance(current, dict) or segment not in current:
            return default
        current = current[segment]
    return current


def _env_flag(name: str) -> Optional[bool]:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return None
    return raw in {"1", "true", "yes", "y", "on"}


def _env_str(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def env_overrides() -> Dict[str, Any]:
    """Collect SVNREV_* environment overrides as a nested config dict."""
    overrides: Dict[str, Any] = {}
    install_root = _env_str("SVNREV_INSTALL_ROOT")
    if install_root is not None:
        overrides.setdefault("tool", {})["install_root"] = install_root
    executable = _env_str("SVNREV_EXECUTABLE")
    if executable is not None:
        overrides.setdefault("tool", {})["executable"] = executable
    legacy_low = _env_flag("SVNREV_LEGACY_LOW")
    if legacy_low is not None:
        overrides.setdefault("parse", {})["legacy_low"] = legacy_low
    verbosity = _env_str("SVNREV_LOG_VERBOSITY")
    if verbosity is not None:
        overrides.setdefault("log", {})["verbosity"] = verbosity
    return overrides


def build_overrides(
    install_root: Optional[str] = None,
    executable: Optional[str] = None,
    legacy_low: Optional[bool] = None,
    verbosity: Optional[str] = None,
    output_format: Optional[str] = None,
) -> Dict[str, Any]:
    """Turn explicit (CLI) values into a nested override dict, skipping None."""
    values = {
        ("tool", "install_root"): install_root,
        ("tool", "executable"): executable,
        ("parse", "legacy_low"): legacy_low,
        ("log", "verbosity"): verbosity,
        ("output", "format"): output_format,
    }
    overrides: Dict[str, Any] = {}
    for (section, key), value in values.items():
        if value is not None:
            overrides.setdefault(section, {})[key] = value
    return overrides


def resolve_config_path(
    config_path: Optional[Path] = None,
    cwd: Optional[Path] = None,
) -> Optional[Path]:
    """
    Pick the config file to load.

    An explicit path (argument or SVNREV_CONFIG_PATH) must exist; the
    svnrev.toml fallback in the working directory is optional.
    """
    raw = str(config_path) if config_path else _env_str(CONFIG_PATH_ENV)
    base = (cwd or Path.cwd()).resolve()
    if raw:
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = (base / path).resolve()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return path
    candidate = base / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.exists() else None


def load_config_file(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid config JSON: {path} ({exc})") from exc
    else:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid config TOML: {path} ({exc})") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a table/object: {path}")
    return data


def load_config(
    config_path: Optional[Path] = None,
    cwd: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Return the merged, unvalidated config dict."""
    config = default_config()
    path = resolve_config_path(config_path, cwd)
    if path is not None:
        config = merge_defaults(config, load_config_file(path))
    config = merge_defaults(config, env_overrides())
    if overrides:
        config = merge_defaults(config, overrides)
    return config


def _format_validation_errors(exc: ValidationError) -> List[str]:
    errors: List[str] = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        errors.append(f"{location or '<root>'}: {err.get('msg', 'invalid value')}")
    return errors


def validate_config(config: Dict[str, Any]) -> List[str]:
    """Return a list of human-readable problems (empty when valid)."""
    try:
        SvnrevSettings.model_validate(config)
    except ValidationError as exc:
        return _format_validation_errors(exc)
    return []


def load_settings(
    config_path: Optional[Path] = None,
    cwd: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SvnrevSettings:
    config = load_config(config_path=config_path, cwd=cwd, overrides=overrides)
    try:
        return SvnrevSettings.model_validate(config)
    except ValidationError as exc:
        raise ConfigError("Invalid configuration", _format_validation_errors(exc)) from exc
