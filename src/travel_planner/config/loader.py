"""
travel-planner: effective configuration loading.

File: src/travel_planner/config/loader.py

Purpose
- Build the effective config from built-in defaults, ``travel_planner.toml``,
  ``TRAVEL_PLANNER_<SECTION>_<FIELD>`` environment variables and CLI overrides,
  in increasing precedence.
- Resolve ``observability.log_dir`` against the directory of the config file.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from travel_planner.config.schema import (
    FIELD_RULES,
    default_config,
    merge_config,
    validate_config,
)

DEFAULT_CONFIG_FILE: Final[str] = "travel_planner.toml"
ENV_PREFIX: Final[str] = "TRAVEL_PLANNER_"

_TRUE_WORDS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


class ConfigLoadError(ValueError):
    """Raised when a config source cannot be read or an override cannot be parsed."""


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return the validated effective config.

    Without ``config_path`` the file is ``./travel_planner.toml`` and may be
    absent. An explicit path must exist. ``cli_overrides`` maps dotted keys
    such as ``"output.format"`` to values; ``None`` values are skipped.
    """

    explicit = config_path is not None
    path = Path(config_path).expanduser() if explicit else Path.cwd() / DEFAULT_CONFIG_FILE
    path = path.resolve()

    layers = (
        _read_toml(path, required=explicit),
        env_overrides(os.environ if environ is None else environ),
        _cli_layer(cli_overrides or {}),
    )
    merged = default_config()
    for layer in layers:
        merged = merge_config(merged, layer)

    config = validate_config(merged)
    observability = config["observability"]
    observability["log_dir"] = _resolve_log_dir(observability["log_dir"], path.parent)
    return config


def env_overrides(environ: Mapping[str, str]) -> dict[str, dict[str, object]]:
    """Collect typed overrides from ``TRAVEL_PLANNER_<SECTION>_<FIELD>`` variables."""

    layer: dict[str, dict[str, object]] = {}
    for section, rules in FIELD_RULES.items():
        for name, rule in rules.items():
            env_name = f"{ENV_PREFIX}{section}_{name}".upper()
            if env_name not in environ:
                continue
            raw = environ[env_name]
            value: object = raw
            if rule.kind == "int":
                value = _env_int(env_name, raw)
            elif rule.kind == "bool":
                value = _env_bool(env_name, raw)
            layer.setdefault(section, {})[name] = value
    return layer


def dump_effective_config(config: Mapping[str, object]) -> str:
    """Render ``config`` as stable, human-readable JSON."""

    return json.dumps(config, indent=2, sort_keys=True, ensure_ascii=False)


def _read_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.is_file():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc


def _cli_layer(overrides: Mapping[str, object]) -> dict[str, dict[str, object]]:
    layer: dict[str, dict[str, object]] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        section, _, name = key.partition(".")
        if not section or not name:
            raise ConfigLoadError(f"invalid override key {key!r}; expected 'section.field'")
        layer.setdefault(section, {})[name] = value
    return layer


def _env_int(env_name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigLoadError(f"{env_name} must be an integer, got {raw!r}") from exc


def _env_bool(env_name: str, raw: str) -> bool:
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ConfigLoadError(f"{env_name} must be a boolean (true/false, yes/no, on/off, 1/0)")


def _resolve_log_dir(raw: str, base_dir: Path) -> str:
    candidate = Path(raw).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return Path(os.path.normpath(candidate)).as_posix()


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "ConfigLoadError",
    "dump_effective_config",
    "env_overrides",
    "load_config",
]
