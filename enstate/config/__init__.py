"""Configuration module for enstate."""

from enstate.config.settings import (
    DriverConfig,
    EnstateConfig,
    LoggingConfig,
    load_config,
)

__all__ = ["DriverConfig", "EnstateConfig", "LoggingConfig", "load_config"]
