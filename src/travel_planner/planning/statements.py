"""Statement parsing and statement-file loading.

A statement has the shape ``DESTINATION => PREDECESSOR``: the predecessor must
be visited before the destination. ``DESTINATION =>`` declares a destination
without any ordering requirement.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import cast

import yaml

from travel_planner.constants import COMMENT_PREFIX, DEFAULT_SEPARATOR, YAML_SUFFIXES
from travel_planner.planning.errors import MalformedStatementError


class StatementSourceError(ValueError):
    """Raised when statements cannot be read from a file."""


@dataclass(frozen=True, slots=True)
class Constraint:
    """One parsed statement."""

    destination: str
    predecessor: str | None = None

    def __post_init__(self) -> None:
        if not self.destination:
            raise ValueError("destination must be non-empty")
        if self.predecessor is not None and not self.predecessor:
            raise ValueError("predecessor must be None or non-empty")

    @property
    def has_predecessor(self) -> bool:
        return self.predecessor is not None


def parse_statement(
    line: str,
    *,
    separator: str = DEFAULT_SEPARATOR,
    line_number: int | None = None,
) -> Constraint:
    """Parse a single ``DESTINATION => [PREDECESSOR]`` statement.

    Text after a second separator is ignored.
    """

    _validate_separator(separator)
    if not isinstance(line, str):
        raise TypeError(f"statement must be a string, got {type(line).__name__}")

    stripped = line.strip()
    if separator not in stripped or stripped.startswith(separator):
        raise MalformedStatementError(line, separator=separator, line_number=line_number)

    parts = stripped.split(separator)
    destination = parts[0].strip()
    predecessor = parts[1].strip()
    return Constraint(destination=destination, predecessor=predecessor or None)


def parse_statements(
    lines: Iterable[str],
    *,
    separator: str = DEFAULT_SEPARATOR,
) -> tuple[Constraint, ...]:
    """Parse statements in input order; errors carry the 1-based statement number."""

    return tuple(
        parse_statement(line, separator=separator, line_number=index)
        for index, line in enumerate(lines, start=1)
    )


def load_statements(path: str | Path) -> tuple[str, ...]:
    """Read raw statements from a text or YAML file."""

    resolved = Path(path)
    if not resolved.is_file():
        raise StatementSourceError(f"statement file not found: {resolved}")

    if resolved.suffix.lower() in YAML_SUFFIXES:
        return _load_yaml_statements(resolved)
    return _load_text_statements(resolved)


def _load_text_statements(path: Path) -> tuple[str, ...]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StatementSourceError(f"unable to read statement file {path}: {exc}") from exc

    statements: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        statements.append(stripped)
    return tuple(statements)


def _load_yaml_statements(path: Path) -> tuple[str, ...]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = cast("object", yaml.safe_load(handle))
    except yaml.YAMLError as exc:
        raise StatementSourceError(f"{path}: invalid YAML ({exc})") from exc
    except OSError as exc:
        raise StatementSourceError(f"unable to read statement file {path}: {exc}") from exc

    if loaded is None:
        return ()
    if not isinstance(loaded, list):
        raise StatementSourceError(
            f"{path}: expected top-level YAML sequence, got {type(loaded).__name__}"
        )

    statements: list[str] = []
    for index, item in enumerate(loaded):
        if not isinstance(item, str):
            raise StatementSourceError(
                f"{path.name}[{index}]: expected string statement, got {type(item).__name__}"
            )
        statements.append(item)
    return tuple(statements)


def _validate_separator(separator: str) -> None:
    if not separator or separator != separator.strip():
        raise ValueError("separator must be non-empty and carry no surrounding whitespace")


__all__ = [
    "Constraint",
    "StatementSourceError",
    "load_statements",
    "parse_statement",
    "parse_statements",
]
