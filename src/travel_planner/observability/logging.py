"""
travel-planner: JSON-lines logging for one planner command.

File: src/travel_planner/observability/logging.py

Every record is one JSON object with ``timestamp``, ``level``, ``logger``,
``message`` and ``run_id``, the fields bound by ``correlation_scope`` and any
``extra=`` values under ``fields``. Records go to stderr and, when
``log_to_file`` is set, to ``<log_dir>/<run_id>/planner.jsonl``.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, TextIO

LOG_FILENAME: Final[str] = "planner.jsonl"
ROOT_LOGGER: Final[str] = "travel_planner"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRIBUTES: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

_CORRELATION: ContextVar[tuple[tuple[str, str], ...]] = ContextVar(
    "travel_planner_correlation", default=()
)


class JsonLineFormatter(logging.Formatter):
    """Render log records as single-line JSON objects with sorted keys."""

    def __init__(self, *, run_id: str) -> None:
        super().__init__()
        self._run_id = run_id

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        event: dict[str, object] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": self._run_id,
        }
        event.update(current_correlation())

        fields = {
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        }
        if fields:
            event["fields"] = fields
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class LoggingSession:
    """Handlers attached for one run; ``close`` detaches and closes them."""

    logger: logging.Logger
    run_id: str
    log_path: Path | None
    handlers: tuple[logging.Handler, ...]

    def close(self) -> None:
        for handler in self.handlers:
            self.logger.removeHandler(handler)
            handler.close()


def setup_logging(
    observability: Mapping[str, object],
    *,
    run_id: str,
    logger_name: str = ROOT_LOGGER,
    stream: TextIO | None = None,
) -> LoggingSession:
    """Attach JSON-lines handlers for ``run_id`` to ``logger_name``.

    ``observability`` is the ``[observability]`` config section. ``stream``
    replaces stderr as the console sink.
    """

    if not run_id.strip():
        raise ValueError("run_id must not be empty")
    raw_level = observability.get("log_level", "WARNING")
    level = logging.getLevelName(str(raw_level).strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"unsupported log level {raw_level!r}")

    handlers: list[logging.Handler] = [
        logging.StreamHandler(stream if stream is not None else sys.stderr)
    ]
    log_path: Path | None = None
    if observability.get("log_to_file", False):
        log_path = Path(str(observability.get("log_dir", "logs"))) / run_id / LOG_FILENAME
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    formatter = JsonLineFormatter(run_id=run_id)
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return LoggingSession(logger=logger, run_id=run_id, log_path=log_path, handlers=tuple(handlers))


def current_correlation() -> dict[str, str]:
    """Fields bound by the enclosing ``correlation_scope`` blocks."""

    return dict(_CORRELATION.get())


@contextmanager
def correlation_scope(**fields: str | None) -> Iterator[None]:
    """Bind ``fields`` to every record logged inside the block; ``None`` unbinds a field."""

    bound = current_correlation()
    for key, value in fields.items():
        if value is None:
            bound.pop(key, None)
        else:
            bound[key] = value
    token = _CORRELATION.set(tuple(bound.items()))
    try:
        yield
    finally:
        _CORRELATION.reset(token)


def _jsonable(value: object) -> object:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return repr(value)


__all__ = [
    "LOG_FILENAME",
    "ROOT_LOGGER",
    "JsonLineFormatter",
    "LoggingSession",
    "correlation_scope",
    "current_correlation",
    "setup_logging",
]
