"""JSON-lines logging for planner commands."""

from travel_planner.observability.logging import (
    LoggingSession,
    correlation_scope,
    current_correlation,
    setup_logging,
)

__all__ = ["LoggingSession", "correlation_scope", "current_correlation", "setup_logging"]
