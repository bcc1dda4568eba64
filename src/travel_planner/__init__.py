"""
travel-planner: order destinations from pairwise predecessor statements.

A statement ``DESTINATION => PREDECESSOR`` requires the predecessor to be
visited before the destination; ``DESTINATION =>`` declares a destination with
no requirement. ``plan_travel`` returns one ordering covering every declared
destination exactly once, or raises a ``PlanningError`` for the first
malformed, self-referential, duplicated, cyclic or incomplete input.

Importing the package has no side effects (no config loading, no logging init).
"""

from travel_planner.planning import (
    Constraint,
    CycleError,
    DuplicateDestinationError,
    IncompleteOrderingError,
    MalformedStatementError,
    PlanningError,
    SelfDependencyError,
    plan_travel,
    verify_ordering,
)

__version__ = "1.0.0"

__all__ = [
    "Constraint",
    "CycleError",
    "DuplicateDestinationError",
    "IncompleteOrderingError",
    "MalformedStatementError",
    "PlanningError",
    "SelfDependencyError",
    "__version__",
    "plan_travel",
    "verify_ordering",
]
