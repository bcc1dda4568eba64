"""
travel-planner planning package.

File: src/travel_planner/planning/__init__.py

Purpose
- Statement parsing, incremental travel planning and ordering verification.

Functional requirements
- Must produce a travel covering every declared destination exactly once.
- The first violated constraint aborts planning; no partial travel is returned.

Non-functional requirements
- Must produce the same travel for the same statements in the same order.
"""

from __future__ import annotations

from travel_planner.planning.errors import (
    CycleError,
    DuplicateDestinationError,
    IncompleteOrderingError,
    MalformedStatementError,
    OrderingVerificationError,
    PlanningError,
    SelfDependencyError,
)
from travel_planner.planning.sequence_builder import (
    PlanState,
    SequenceBuilder,
    build_travel,
    plan_travel,
)
from travel_planner.planning.statements import (
    Constraint,
    StatementSourceError,
    load_statements,
    parse_statement,
    parse_statements,
)
from travel_planner.planning.verification import (
    VerificationReport,
    assert_valid_ordering,
    verify_ordering,
)

__all__ = [
    "Constraint",
    "CycleError",
    "DuplicateDestinationError",
    "IncompleteOrderingError",
    "MalformedStatementError",
    "OrderingVerificationError",
    "PlanState",
    "PlanningError",
    "SelfDependencyError",
    "SequenceBuilder",
    "StatementSourceError",
    "VerificationReport",
    "assert_valid_ordering",
    "build_travel",
    "load_statements",
    "parse_statement",
    "parse_statements",
    "plan_travel",
    "verify_ordering",
]
