"""Command-line surface: argparse router and output rendering."""

from travel_planner.ui.cli import CLIError, build_parser, run_cli
from travel_planner.ui.render import CLIRenderer

__all__ = ["CLIError", "CLIRenderer", "build_parser", "run_cli"]
