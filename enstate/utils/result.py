"""Result type for explicit error handling.

Machines themselves never fail: an illegal transition is a silent no-op.
The layers around them (configuration loading and the session driver) do
fail, and report it through this Result type so callers have to decide
what a rejected step or a bad config file means for them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped type


class ResultError(Exception):
    """Raised when unwrapping a Result fails."""

    pass


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value. Safe to call since this is Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get the success value or a default."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Get the error value. Raises since this is Ok."""
        raise ResultError(f"Called unwrap_err on Ok value: {self.value!r}")

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value."""
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Chain another Result-returning operation."""
        return fn(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents an error result."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Get the success value. Raises since this is Err."""
        raise ResultError(f"Called unwrap on Err value: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Get the success value or a default."""
        return default

    def unwrap_err(self) -> E:
        """Get the error value. Safe to call since this is Err."""
        return self.error

    def map(self, fn: Callable[[T], U]) -> "Err[E]":
        """Transform the success value. No-op for Err."""
        return self

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Err[E]":
        """Chain another Result-returning operation. No-op for Err."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class ConfigError:
    """Error in configuration."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"Config error in '{self.field}': {self.message}"


# Exit codes
class ExitCode:
    """Exit codes for CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1

    CONFIG_ERROR = 2
    TARGET_ERROR = 3
    TRANSITION_REJECTED = 4
