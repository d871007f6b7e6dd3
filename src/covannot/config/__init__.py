"""Config module exports."""

from covannot.config.loader import load_config
from covannot.config.models import (
    CheckConfig,
    CovAnnotConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "CheckConfig",
    "CovAnnotConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
