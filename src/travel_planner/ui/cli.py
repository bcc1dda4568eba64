"""Command-line interface router for travel-planner."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Final
from uuid import uuid4

from travel_planner.config import (
    LOG_LEVELS,
    ConfigLoadError,
    ConfigValidationError,
    dump_effective_config,
    load_config,
)
from travel_planner.constants import OUTPUT_FORMATS, UNANCHORED_ORDERS
from travel_planner.observability import correlation_scope, setup_logging
from travel_planner.planning import (
    PlanningError,
    StatementSourceError,
    build_travel,
    load_statements,
    parse_statements,
    verify_ordering,
)
from travel_planner.ui.render import CLIRenderer

EXIT_REJECTED: Final[int] = 1
EXIT_USAGE: Final[int] = 2

_LOGGER: Final[logging.Logger] = logging.getLogger("travel_planner.cli")


class CLIError(RuntimeError):
    """CLI failure carrying the process exit code."""

    def __init__(self, message: str, exit_code: int = EXIT_REJECTED) -> None:
        super().__init__(message)
        self.exit_code = exit_code


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="travel-planner",
        description=(
            "travel-planner: order destinations from 'DESTINATION => PREDECESSOR' statements.\n\n"
            "Common workflows:\n"
            '  travel-planner plan "x => z" "y => z" "z =>"     Plan a travel\n'
            "  travel-planner plan --file route.txt            Plan from a statement file\n"
            "  travel-planner verify --ordering z,y,x -f f.txt Check an existing ordering\n"
            "  travel-planner config                           Show effective config\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to TOML config (default: ./travel_planner.toml if present).",
    )
    common.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Override observability.log_level.",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show detailed output.",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output (also respects NO_COLOR env var).",
    )

    statements = argparse.ArgumentParser(add_help=False)
    statements.add_argument(
        "statements",
        nargs="*",
        metavar="STATEMENT",
        help="Statements such as 'x => z' (z before x) or 'h =>' (no constraint).",
    )
    statements.add_argument(
        "--file",
        "-f",
        dest="statement_file",
        default=None,
        help="Read statements from a text file (one per line) or a YAML sequence.",
    )
    statements.add_argument(
        "--separator",
        default=None,
        help=(
            "Override planner.separator (default: '=>'). "
            "Write separators starting with '-' as --separator=->."
        ),
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # plan ----------------------------------------------------------------
    plan_parser = subparsers.add_parser(
        "plan",
        parents=[common, statements],
        help="Plan a travel that honours every statement",
        description=(
            "Plan one travel covering every declared destination exactly once.\n"
            "Without statements the travel is empty.\n\n"
            "Examples:\n"
            '  travel-planner plan "x => z" "y => z" "z => v" "h =>" "v => h"\n'
            "  travel-planner plan --file route.yaml --format json\n"
            '  travel-planner plan --separator=-> "b -> a" "a ->"\n'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    plan_parser.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Override output.format.",
    )
    plan_parser.add_argument(
        "--unanchored-order",
        dest="unanchored_order",
        choices=UNANCHORED_ORDERS,
        default=None,
        help="Override planner.unanchored_order.",
    )
    plan_parser.set_defaults(handler=_cmd_plan)

    # verify --------------------------------------------------------------
    verify_parser = subparsers.add_parser(
        "verify",
        parents=[common, statements],
        help="Check an existing ordering against statements",
        description=(
            "Verify that an ordering covers every declared destination once and\n"
            "places every predecessor before its destination.\n\n"
            "Examples:\n"
            '  travel-planner verify --ordering h,v,z,y,x "x => z" "y => z" "z => v" "v => h" "h =>"\n'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    verify_parser.add_argument(
        "--ordering",
        required=True,
        help="Comma-separated ordering to check.",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Emit a JSON report.",
    )
    verify_parser.set_defaults(handler=_cmd_verify)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Show the effective configuration",
    )
    config_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Emit compact JSON.",
    )
    config_parser.set_defaults(handler=_cmd_config)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    namespace = build_parser().parse_args(list(argv) if argv is not None else None)
    try:
        return int(namespace.handler(namespace))
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_plan(args: argparse.Namespace) -> int:
    config = _load_effective_config(
        args,
        {
            "planner.separator": args.separator,
            "planner.unanchored_order": args.unanchored_order,
            "output.format": args.output_format,
        },
    )
    planner = config["planner"]
    raw_statements = _collect_statements(args)

    travel: tuple[str, ...] = ()
    rejection: PlanningError | None = None
    with _logging_session(config, command="plan"):
        try:
            constraints = parse_statements(raw_statements, separator=planner["separator"])
            travel = build_travel(constraints, unanchored_order=planner["unanchored_order"])
        except PlanningError as exc:
            _LOGGER.info("plan rejected", extra={"items": exc.items})
            rejection = exc
    if rejection is not None:
        raise CLIError(str(rejection), exit_code=EXIT_REJECTED) from rejection

    _renderer(args).travel(travel, output_format=config["output"]["format"])
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    config = _load_effective_config(args, {"planner.separator": args.separator})
    ordering = tuple(item.strip() for item in args.ordering.split(",") if item.strip())
    raw_statements = _collect_statements(args)

    rejection: PlanningError | None = None
    with _logging_session(config, command="verify"):
        try:
            constraints = parse_statements(raw_statements, separator=config["planner"]["separator"])
        except PlanningError as exc:
            rejection = exc
    if rejection is not None:
        raise CLIError(str(rejection), exit_code=EXIT_REJECTED) from rejection

    report = verify_ordering(ordering, constraints)
    exit_code = 0 if report.is_valid else EXIT_REJECTED
    renderer = _renderer(args)
    if args.json:
        renderer.emit_json(
            {"command": "verify", "valid": report.is_valid, "problems": list(report.problems())}
        )
        return exit_code

    if report.is_valid:
        renderer.status(True, f"ordering satisfies {len(constraints)} statement(s)")
        if renderer.verbose:
            renderer.items(ordering)
    else:
        renderer.status(False, "ordering is not valid")
        renderer.items(report.problems())
    return exit_code


def _cmd_config(args: argparse.Namespace) -> int:
    config = _load_effective_config(args, {})
    renderer = _renderer(args)

    if args.json:
        renderer.emit_json({"command": "config", "config": config})
        return 0

    renderer.kv("Config file", args.config_path or "(default)")
    renderer.line(dump_effective_config(config))
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _renderer(args: argparse.Namespace) -> CLIRenderer:
    return CLIRenderer(no_color=args.no_color, verbose=args.verbose)


def _load_effective_config(
    args: argparse.Namespace,
    overrides: dict[str, object],
) -> dict[str, Any]:
    cli_overrides = {**overrides, "observability.log_level": args.log_level}
    try:
        return load_config(args.config_path, cli_overrides=cli_overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=EXIT_USAGE) from exc


def _collect_statements(args: argparse.Namespace) -> tuple[str, ...]:
    collected: list[str] = []
    if args.statement_file is not None:
        try:
            collected.extend(load_statements(args.statement_file))
        except StatementSourceError as exc:
            raise CLIError(str(exc), exit_code=EXIT_USAGE) from exc
    collected.extend(args.statements)
    return tuple(collected)


@contextmanager
def _logging_session(config: dict[str, Any], *, command: str) -> Iterator[None]:
    """Attach run-scoped logging for one command and detach it afterwards."""

    session = setup_logging(config["observability"], run_id=f"{command}-{uuid4().hex}")
    try:
        with correlation_scope(command=command):
            yield
    finally:
        session.close()


__all__ = ["CLIError", "build_parser", "run_cli"]
