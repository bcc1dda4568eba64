"""Process entrypoint: run the CLI and map failures onto exit codes."""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

from travel_planner.config import ConfigLoadError, ConfigValidationError
from travel_planner.planning import PlanningError, StatementSourceError
from travel_planner.ui.cli import run_cli

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class ExitCode(IntEnum):
    SUCCESS = 0
    PLAN_REJECTED = 1
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 4


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Entrypoint of ``travel-planner`` and ``python -m travel_planner``."""

    try:
        return run_cli(argv)
    except SystemExit as exc:
        # argparse exits 0 for --help and 2 for usage errors.
        if exc.code is None:
            return int(ExitCode.SUCCESS)
        return exc.code if isinstance(exc.code, int) else int(ExitCode.CONFIG_ERROR)
    except Exception as exc:  # noqa: BLE001 - last line before the process exits.
        exit_code = exit_code_for(exc)
        if exit_code is ExitCode.INTERNAL_ERROR:
            traceback.print_exception(exc, file=sys.stderr)
        else:
            print(f"error: {exc}", file=sys.stderr)
        return int(exit_code)


def exit_code_for(exc: BaseException) -> ExitCode:
    """Exit code for ``exc``, decided by the first known error in its cause chain."""

    for item in _cause_chain(exc):
        if isinstance(item, PlanningError):
            return ExitCode.PLAN_REJECTED
        if isinstance(item, (ConfigLoadError, ConfigValidationError, StatementSourceError)):
            return ExitCode.CONFIG_ERROR
        if isinstance(item, OSError):
            return ExitCode.CONFIG_ERROR
    return ExitCode.INTERNAL_ERROR


def _cause_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__suppress_context__:
            current = None
        else:
            current = current.__context__


__all__ = ["ExitCode", "cli_entrypoint", "exit_code_for"]
