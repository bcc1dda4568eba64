"""
travel-planner: schema of ``travel_planner.toml``.

File: src/travel_planner/config/schema.py

Purpose
- Hold built-in defaults and one rule per field of the four config sections.
- Validate a merged config payload and report every problem with its dotted path.

Unknown sections and fields are errors so a typo never silently falls back to
a default.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, TypedDict

from travel_planner.constants import (
    CONFIG_SCHEMA_VERSION,
    DEFAULT_SEPARATOR,
    OUTPUT_FORMATS,
    UNANCHORED_FIRST_SEEN,
    UNANCHORED_ORDERS,
)

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")


class MetaConfig(TypedDict):
    schema_version: int


class PlannerConfig(TypedDict):
    separator: str
    unanchored_order: str


class OutputConfig(TypedDict):
    format: str


class ObservabilityConfig(TypedDict):
    log_level: str
    log_dir: str
    log_to_file: bool


class PlannerSettings(TypedDict):
    meta: MetaConfig
    planner: PlannerConfig
    output: OutputConfig
    observability: ObservabilityConfig


DEFAULT_CONFIG: Final[PlannerSettings] = {
    "meta": {"schema_version": CONFIG_SCHEMA_VERSION},
    "planner": {"separator": DEFAULT_SEPARATOR, "unanchored_order": UNANCHORED_FIRST_SEEN},
    "output": {"format": "text"},
    "observability": {"log_level": "WARNING", "log_dir": "logs", "log_to_file": False},
}


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Expected type of one field, plus its allowed values for enumerations."""

    kind: Literal["str", "int", "bool"]
    choices: tuple[str, ...] = ()
    case_insensitive: bool = False


FIELD_RULES: Final[dict[str, dict[str, FieldRule]]] = {
    "meta": {"schema_version": FieldRule("int")},
    "planner": {
        "separator": FieldRule("str"),
        "unanchored_order": FieldRule("str", UNANCHORED_ORDERS),
    },
    "output": {"format": FieldRule("str", OUTPUT_FORMATS)},
    "observability": {
        "log_level": FieldRule("str", LOG_LEVELS, case_insensitive=True),
        "log_dir": FieldRule("str"),
        "log_to_file": FieldRule("bool"),
    },
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """One validation problem at a dotted config path."""

    path: str
    message: str


class ConfigValidationError(ValueError):
    """Raised when a config payload breaks the schema."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        rendered = "\n".join(f"- {issue.path}: {issue.message}" for issue in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


def default_config() -> dict[str, Any]:
    """Return a fresh copy of the built-in defaults."""

    return copy.deepcopy(dict(DEFAULT_CONFIG))


def migration_guidance(found_version: int) -> str:
    if found_version < CONFIG_SCHEMA_VERSION:
        return (
            f"schema_version {found_version} predates supported {CONFIG_SCHEMA_VERSION}; "
            "rewrite travel_planner.toml against the current sections"
        )
    if found_version > CONFIG_SCHEMA_VERSION:
        return (
            f"schema_version {found_version} is newer than supported {CONFIG_SCHEMA_VERSION}; "
            "upgrade travel-planner"
        )
    return "schema version is current"


def merge_config(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Lay the sections of ``overlay`` over ``base`` field by field. Inputs are not modified."""

    merged = copy.deepcopy(dict(base))
    for section, values in overlay.items():
        current = merged.get(section)
        if isinstance(values, Mapping) and isinstance(current, dict):
            current.update(copy.deepcopy(dict(values)))
        else:
            merged[section] = copy.deepcopy(values)
    return merged


def config_issues(payload: object) -> tuple[ConfigValidationIssue, ...]:
    """Return every schema problem of ``payload``; empty means valid."""

    issues: list[ConfigValidationIssue] = []
    _check_payload(payload, issues)
    return tuple(issues)


def validate_config(payload: object) -> dict[str, Any]:
    """Return a normalized copy of ``payload`` or raise ``ConfigValidationError``."""

    issues: list[ConfigValidationIssue] = []
    normalized = _check_payload(payload, issues)
    if issues:
        raise ConfigValidationError(issues)
    return normalized


def _check_payload(payload: object, issues: list[ConfigValidationIssue]) -> dict[str, Any]:
    if not isinstance(payload, Mapping):
        kind = type(payload).__name__
        issues.append(ConfigValidationIssue("<root>", f"expected table, got {kind}"))
        return {}

    normalized: dict[str, Any] = {}
    for section in sorted(set(payload) | set(FIELD_RULES)):
        rules = FIELD_RULES.get(section)
        if rules is None:
            issues.append(ConfigValidationIssue(section, "unknown section"))
        elif section not in payload:
            issues.append(ConfigValidationIssue(section, "missing required section"))
        elif not isinstance(payload[section], Mapping):
            kind = type(payload[section]).__name__
            issues.append(ConfigValidationIssue(section, f"expected table, got {kind}"))
        else:
            normalized[section] = _check_section(section, payload[section], rules, issues)
    return normalized


def _check_section(
    section: str,
    values: Mapping[str, object],
    rules: Mapping[str, FieldRule],
    issues: list[ConfigValidationIssue],
) -> dict[str, Any]:
    checked: dict[str, Any] = {}
    for name in sorted(set(values) | set(rules)):
        path = f"{section}.{name}"
        rule = rules.get(name)
        if rule is None:
            issues.append(ConfigValidationIssue(path, "unknown field"))
            continue
        if name not in values:
            issues.append(ConfigValidationIssue(path, "missing required field"))
            continue
        value, problem = _check_value(values[name], rule)
        if problem is None:
            problem = _check_constraint(path, value)
        if problem is not None:
            issues.append(ConfigValidationIssue(path, problem))
            continue
        checked[name] = value
    return checked


def _check_value(value: object, rule: FieldRule) -> tuple[object, str | None]:
    kind = type(value).__name__
    if rule.kind == "bool":
        if isinstance(value, bool):
            return value, None
        return None, f"expected boolean, got {kind}"
    if rule.kind == "int":
        if isinstance(value, int) and not isinstance(value, bool):
            return value, None
        return None, f"expected integer, got {kind}"

    if not isinstance(value, str) or not value.strip():
        return None, f"expected non-empty string, got {value!r}"
    text = value.strip().upper() if rule.case_insensitive else value
    if rule.choices and text not in rule.choices:
        return None, f"invalid value {text!r}; expected one of: {', '.join(rule.choices)}"
    return text, None


def _check_constraint(path: str, value: Any) -> str | None:
    if path == "planner.separator" and any(char.isspace() for char in value):
        return "must not contain whitespace"
    if path == "meta.schema_version" and value != CONFIG_SCHEMA_VERSION:
        return migration_guidance(value)
    return None


__all__ = [
    "DEFAULT_CONFIG",
    "FIELD_RULES",
    "LOG_LEVELS",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "FieldRule",
    "PlannerSettings",
    "config_issues",
    "default_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
