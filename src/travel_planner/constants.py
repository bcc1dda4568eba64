"""Stable constants shared across planner components."""

from __future__ import annotations

from typing import Final

# Statement syntax.
DEFAULT_SEPARATOR: Final[str] = "=>"
COMMENT_PREFIX: Final[str] = "#"

# Tie-break rules for items that end up with no ordering relationship.
UNANCHORED_FIRST_SEEN: Final[str] = "first_seen"
UNANCHORED_SORTED: Final[str] = "sorted"
UNANCHORED_ORDERS: Final[tuple[str, ...]] = (UNANCHORED_FIRST_SEEN, UNANCHORED_SORTED)

# Rendering.
OUTPUT_FORMATS: Final[tuple[str, ...]] = ("text", "json", "yaml")

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1

# Statement files with these suffixes are parsed as YAML sequences.
YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})

__all__ = [
    "COMMENT_PREFIX",
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_SEPARATOR",
    "OUTPUT_FORMATS",
    "UNANCHORED_FIRST_SEEN",
    "UNANCHORED_ORDERS",
    "UNANCHORED_SORTED",
    "YAML_SUFFIXES",
]
