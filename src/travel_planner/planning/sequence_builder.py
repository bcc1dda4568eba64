"""Incremental travel planning over ordered destination statements.

Constraints are consumed strictly in input order. After every insertion the
planned travel satisfies ``position(predecessor) < position(destination)`` for
each constraint processed so far, so later insertions can rely on the current
positions.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Final

from travel_planner.constants import (
    DEFAULT_SEPARATOR,
    UNANCHORED_FIRST_SEEN,
    UNANCHORED_ORDERS,
    UNANCHORED_SORTED,
)
from travel_planner.planning.errors import (
    CycleError,
    DuplicateDestinationError,
    IncompleteOrderingError,
    PlanningError,
    SelfDependencyError,
)
from travel_planner.planning.statements import Constraint, parse_statements

_LOGGER: Final[logging.Logger] = logging.getLogger("travel_planner.planning")


@dataclass(slots=True)
class PlanState:
    """Mutable state of one planning computation.

    ``declared`` and ``unanchored`` are dicts used as insertion-ordered sets.
    ``placed`` mirrors the members of ``travel``.
    """

    travel: list[str] = field(default_factory=list)
    declared: dict[str, None] = field(default_factory=dict)
    unanchored: dict[str, None] = field(default_factory=dict)
    placed: set[str] = field(default_factory=set)

    def contains(self, item: str) -> bool:
        return item in self.placed

    def position(self, item: str) -> int:
        return self.travel.index(item)

    def append(self, item: str) -> None:
        self.travel.append(item)
        self.placed.add(item)

    def insert(self, index: int, item: str) -> None:
        self.travel.insert(index, item)
        self.placed.add(item)


class SequenceBuilder:
    """Build one travel from constraints, one constraint at a time."""

    __slots__ = ("_state", "_unanchored_order", "_finished", "_failed")

    def __init__(self, *, unanchored_order: str = UNANCHORED_FIRST_SEEN) -> None:
        if unanchored_order not in UNANCHORED_ORDERS:
            expected = ", ".join(UNANCHORED_ORDERS)
            raise ValueError(
                f"invalid unanchored order {unanchored_order!r}; expected one of: {expected}"
            )
        self._state = PlanState()
        self._unanchored_order = unanchored_order
        self._finished = False
        self._failed = False

    @property
    def travel(self) -> tuple[str, ...]:
        """The planned travel so far, without unanchored destinations."""
        return tuple(self._state.travel)

    @property
    def declared(self) -> tuple[str, ...]:
        """Declared destinations in first-seen order."""
        return tuple(self._state.declared)

    @property
    def unanchored(self) -> tuple[str, ...]:
        """Destinations waiting to be appended at the end, in first-seen order."""
        return tuple(self._state.unanchored)

    def add(self, constraint: Constraint) -> None:
        """Validate and insert one constraint, or raise a ``PlanningError``."""
        self._assert_accepting()
        try:
            self._add(constraint)
        except PlanningError:
            self._failed = True
            raise

    def extend(self, constraints: Iterable[Constraint]) -> None:
        for constraint in constraints:
            self.add(constraint)

    def finish(self) -> tuple[str, ...]:
        """Append unanchored destinations, validate completeness and return the travel."""
        self._assert_accepting()
        state = self._state

        leftovers = list(state.unanchored)
        if self._unanchored_order == UNANCHORED_SORTED:
            leftovers.sort()
        for item in leftovers:
            state.append(item)
        state.unanchored.clear()

        if len(state.travel) != len(state.declared):
            self._failed = True
            undeclared = [item for item in state.travel if item not in state.declared]
            raise IncompleteOrderingError(
                planned=len(state.travel),
                declared=len(state.declared),
                undeclared=undeclared,
            )

        self._finished = True
        _LOGGER.info(
            "travel planned",
            extra={"destinations": len(state.travel), "unanchored": len(leftovers)},
        )
        return tuple(state.travel)

    def _add(self, constraint: Constraint) -> None:
        state = self._state
        destination = constraint.destination
        predecessor = constraint.predecessor

        self._validate_endpoint(constraint)

        if predecessor is None:
            if not state.contains(destination):
                state.unanchored[destination] = None
        else:
            self._insert_dependency(destination, predecessor)

        state.declared[destination] = None

    def _validate_endpoint(self, constraint: Constraint) -> None:
        if constraint.destination == constraint.predecessor:
            raise SelfDependencyError(constraint.destination)
        if constraint.destination in self._state.declared:
            raise DuplicateDestinationError(constraint.destination)

    def _insert_dependency(self, destination: str, predecessor: str) -> None:
        state = self._state
        has_predecessor = state.contains(predecessor)
        has_destination = state.contains(destination)

        if not has_predecessor and not has_destination:
            state.append(predecessor)
            state.append(destination)
            case = "append-both"
        elif not has_predecessor:
            state.insert(state.position(destination), predecessor)
            case = "predecessor-before"
        elif not has_destination:
            state.insert(state.position(predecessor) + 1, destination)
            case = "destination-after"
        else:
            self._validate_no_cycle(destination, predecessor)
            case = "already-ordered"

        _LOGGER.debug(
            "constraint inserted",
            extra={"destination": destination, "predecessor": predecessor, "case": case},
        )
        state.unanchored.pop(destination, None)
        state.unanchored.pop(predecessor, None)

    def _validate_no_cycle(self, destination: str, predecessor: str) -> None:
        if self._state.position(predecessor) > self._state.position(destination):
            raise CycleError(destination, predecessor)

    def _assert_accepting(self) -> None:
        if self._failed:
            raise PlanningError("planning already failed; start a new builder")
        if self._finished:
            raise PlanningError("planning already finished; start a new builder")


def build_travel(
    constraints: Iterable[Constraint],
    *,
    unanchored_order: str = UNANCHORED_FIRST_SEEN,
) -> tuple[str, ...]:
    """Plan a travel from already parsed constraints."""
    builder = SequenceBuilder(unanchored_order=unanchored_order)
    builder.extend(constraints)
    return builder.finish()


def plan_travel(
    statements: Iterable[str],
    *,
    separator: str = DEFAULT_SEPARATOR,
    unanchored_order: str = UNANCHORED_FIRST_SEEN,
) -> tuple[str, ...]:
    """Parse ``statements`` and plan a travel covering every declared destination."""
    constraints = parse_statements(statements, separator=separator)
    return build_travel(constraints, unanchored_order=unanchored_order)


__all__ = ["PlanState", "SequenceBuilder", "build_travel", "plan_travel"]
