"""Error taxonomy for statement parsing and travel planning."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


class PlanningError(ValueError):
    """Base class for every planning failure.

    ``items`` holds the offending item names, in the order they were observed.
    """

    items: tuple[str, ...]

    def __init__(self, message: str, items: Iterable[str] = ()) -> None:
        self.items = tuple(items)
        super().__init__(message)


class MalformedStatementError(PlanningError):
    """Raised when a statement has no separator or no destination."""

    line: str
    line_number: int | None

    def __init__(self, line: str, *, separator: str, line_number: int | None = None) -> None:
        self.line = line
        self.line_number = line_number
        location = f"statement {line_number}" if line_number is not None else "statement"
        super().__init__(
            f"Invalid input format in {location} {line!r}: "
            f"expected 'DESTINATION {separator} [PREDECESSOR]'."
        )


class SelfDependencyError(PlanningError):
    """Raised when a destination names itself as predecessor."""

    def __init__(self, item: str) -> None:
        super().__init__(
            f"The travel destination and the predecessor are the same for {item!r}.",
            (item,),
        )


class DuplicateDestinationError(PlanningError):
    """Raised when the same destination is declared more than once."""

    def __init__(self, item: str) -> None:
        super().__init__(f"Destination {item!r} is duplicated in the input.", (item,))


class CycleError(PlanningError):
    """Raised when a constraint contradicts the order established so far."""

    destination: str
    predecessor: str

    def __init__(self, destination: str, predecessor: str) -> None:
        self.destination = destination
        self.predecessor = predecessor
        super().__init__(
            f"Circle in the plan: {predecessor!r} must precede {destination!r}, "
            f"but {destination!r} is already placed before {predecessor!r}.",
            (destination, predecessor),
        )


class IncompleteOrderingError(PlanningError):
    """Raised when the planned travel does not match the declared destinations."""

    undeclared: tuple[str, ...]

    def __init__(
        self,
        *,
        planned: int,
        declared: int,
        undeclared: Sequence[str],
    ) -> None:
        self.undeclared = tuple(undeclared)
        if self.undeclared:
            preview = ", ".join(repr(item) for item in self.undeclared[:5])
            suffix = "..." if len(self.undeclared) > 5 else ""
            detail = f"; never declared as destination: {preview}{suffix}"
        else:
            detail = ""
        super().__init__(
            "No valid travel can be created from the dependencies "
            f"({planned} planned, {declared} declared{detail}).",
            self.undeclared,
        )


class OrderingVerificationError(PlanningError):
    """Raised when an existing ordering does not satisfy its constraints."""

    def __init__(self, problems: Sequence[str], items: Iterable[str] = ()) -> None:
        self.problems = tuple(problems)
        if not self.problems:
            rendered = "unknown verification failure"
        else:
            rendered = "\n".join(f"- {problem}" for problem in self.problems)
        super().__init__(f"ordering is not valid:\n{rendered}", items)


__all__ = [
    "CycleError",
    "DuplicateDestinationError",
    "IncompleteOrderingError",
    "MalformedStatementError",
    "OrderingVerificationError",
    "PlanningError",
    "SelfDependencyError",
]
