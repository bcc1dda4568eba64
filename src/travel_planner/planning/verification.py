"""Re-validate an existing travel against the constraints it was planned from."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from travel_planner.planning.errors import OrderingVerificationError
from travel_planner.planning.statements import Constraint


@dataclass(frozen=True, slots=True)
class VerificationReport:
    """Problems found while checking an ordering. Empty report means valid."""

    duplicated: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()
    undeclared: tuple[str, ...] = ()
    violations: tuple[tuple[str, str], ...] = ()

    @property
    def is_valid(self) -> bool:
        return not (self.duplicated or self.missing or self.undeclared or self.violations)

    def problems(self) -> tuple[str, ...]:
        rendered: list[str] = []
        rendered.extend(f"{item!r} appears more than once" for item in self.duplicated)
        rendered.extend(f"declared destination {item!r} is missing" for item in self.missing)
        rendered.extend(f"{item!r} is never declared as destination" for item in self.undeclared)
        rendered.extend(
            f"{predecessor!r} must precede {destination!r}"
            for destination, predecessor in self.violations
        )
        return tuple(rendered)

    def offending_items(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for item in (*self.duplicated, *self.missing, *self.undeclared):
            seen[item] = None
        for destination, predecessor in self.violations:
            seen[destination] = None
            seen[predecessor] = None
        return tuple(seen)


def verify_ordering(
    ordering: Sequence[str],
    constraints: Iterable[Constraint],
) -> VerificationReport:
    """Check ``ordering`` covers every declared destination once and honours every constraint."""

    materialized = tuple(constraints)
    counts = Counter(ordering)
    position: dict[str, int] = {}
    for index, item in enumerate(ordering):
        position.setdefault(item, index)

    declared: dict[str, None] = {}
    referenced: dict[str, None] = {}
    for constraint in materialized:
        declared[constraint.destination] = None
        if constraint.predecessor is not None:
            referenced[constraint.predecessor] = None

    duplicated = tuple(item for item in position if counts[item] > 1)
    missing = tuple(item for item in declared if item not in position)
    # Predecessors that are never declared cannot be part of any valid travel.
    undeclared = tuple(
        item for item in {**position, **referenced} if item not in declared
    )

    violations: list[tuple[str, str]] = []
    for constraint in materialized:
        predecessor = constraint.predecessor
        if predecessor is None:
            continue
        destination = constraint.destination
        if destination not in position or predecessor not in position:
            continue
        if position[predecessor] >= position[destination]:
            violations.append((destination, predecessor))

    return VerificationReport(
        duplicated=duplicated,
        missing=missing,
        undeclared=undeclared,
        violations=tuple(violations),
    )


def assert_valid_ordering(
    ordering: Sequence[str],
    constraints: Iterable[Constraint],
) -> VerificationReport:
    """Verify ``ordering`` and raise ``OrderingVerificationError`` when it is not valid."""

    report = verify_ordering(ordering, constraints)
    if not report.is_valid:
        raise OrderingVerificationError(report.problems(), report.offending_items())
    return report


__all__ = ["VerificationReport", "assert_valid_ordering", "verify_ordering"]
