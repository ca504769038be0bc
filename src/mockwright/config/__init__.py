"""Config module exports."""

from mockwright.config.loader import load_config
from mockwright.config.models import (
    GenerateConfig,
    LoggingConfig,
    LogOutputConfig,
    MockwrightConfig,
    RegisterConfig,
)

__all__ = [
    "load_config",
    "GenerateConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "MockwrightConfig",
    "RegisterConfig",
]
