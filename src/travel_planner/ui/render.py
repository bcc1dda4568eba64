"""Terminal output for the travel-planner CLI.

Travels render as one destination per line (``text``) or as a
``{"travel": [...]}`` document (``json``, ``yaml``). Status tags are coloured
only on a terminal and never when ``NO_COLOR`` is set.
"""

from __future__ import annotations

import json
import os
import sys
from typing import TYPE_CHECKING, Final, TextIO

import yaml

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

_GREEN: Final[str] = "\033[32m"
_RED: Final[str] = "\033[31m"
_RESET: Final[str] = "\033[0m"


class CLIRenderer:
    """Writes command output to ``stream`` (stdout by default)."""

    def __init__(
        self,
        *,
        no_color: bool = False,
        verbose: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self.verbose = verbose
        self._stream = stream if stream is not None else sys.stdout
        self._color = not no_color and not os.environ.get("NO_COLOR") and self._stream.isatty()

    def line(self, text: str = "") -> None:
        self._stream.write(f"{text}\n")

    def kv(self, key: str, value: object) -> None:
        self.line(f"{key}: {value}")

    def items(self, entries: Sequence[str]) -> None:
        for entry in entries:
            self.line(f"  - {entry}")

    def status(self, passed: bool, label: str) -> None:
        tag, colour = ("OK", _GREEN) if passed else ("FAIL", _RED)
        if self._color:
            tag = f"{colour}{tag}{_RESET}"
        self.line(f"{tag}  {label}")

    def emit_json(self, payload: Mapping[str, object]) -> None:
        self.line(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))

    def travel(self, travel: Sequence[str], *, output_format: str) -> None:
        """Write a planned travel in ``text``, ``json`` or ``yaml`` format."""

        if output_format == "json":
            self.emit_json({"travel": list(travel)})
        elif output_format == "yaml":
            self._stream.write(yaml.safe_dump({"travel": list(travel)}, sort_keys=False))
        else:
            for destination in travel:
                self.line(destination)


__all__ = ["CLIRenderer"]
