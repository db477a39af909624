"""Utility modules for enstate."""

from enstate.utils.logging import (
    configure_logging,
    get_logger,
    get_session_id,
    set_session_id,
)
from enstate.utils.result import ConfigError, Err, ExitCode, Ok, Result, ResultError

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_session_id",
    "set_session_id",
    # Result
    "Ok",
    "Err",
    "Result",
    "ResultError",
    "ConfigError",
    "ExitCode",
]
