"""Core module exports."""

from covannot.core.errors import (
    ConfigError,
    CovAnnotError,
    CoverageError,
    ErrorCode,
    ScanError,
)
from covannot.core.logging import configure_logging, get_logger
from covannot.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "CovAnnotError",
    "CoverageError",
    "ErrorCode",
    "ScanError",
    # Logging
    "configure_logging",
    "get_logger",
    # Progress
    "pluralize",
    "spinner",
    "status",
]
