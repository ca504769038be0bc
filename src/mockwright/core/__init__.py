"""Core module exports."""

from mockwright.core.errors import (
    ConfigError,
    ErrorCode,
    GenerateError,
    InternalError,
    MockwrightError,
    OutputError,
    ParseError,
)
from mockwright.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from mockwright.core.progress import pluralize, status

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "GenerateError",
    "InternalError",
    "MockwrightError",
    "OutputError",
    "ParseError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Console
    "pluralize",
    "status",
]
