"""Configuration: ``travel_planner.toml`` schema, env and CLI overrides."""

from travel_planner.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    dump_effective_config,
    load_config,
)
from travel_planner.config.schema import (
    LOG_LEVELS,
    ConfigValidationError,
    ConfigValidationIssue,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "LOG_LEVELS",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "dump_effective_config",
    "load_config",
    "validate_config",
]
