"""Configuration for driving machines.

The machine algebra itself has nothing to configure. What is configurable is
how a session is driven (strictness, step limits, history) and how it logs.
Configuration can be loaded from a YAML file and is validated on load.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from enstate.utils.result import ConfigError, Err, Ok, Result

CONFIG_ENV_VAR = "ENSTATE_CONFIG"

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")
LOG_FORMATS = ("json", "text")
DRIVER_FLAGS = ("enforce_menu", "strict", "stop_when_finished", "record_history")


@dataclass
class DriverConfig:
    """How a Driver treats the machine it owns."""

    # Reject edges that are not on the current menu without touching the
    # machine. Zipped machines only advertise their first machine's menu,
    # so drive those with this off.
    enforce_menu: bool = True

    # Raise TransitionError instead of returning Err for rejected edges
    strict: bool = False

    # Upper bound on steps taken by a single run(); None for unbounded
    max_steps: Optional[int] = None

    # Stop run() as soon as the machine state is not None. Only meaningful
    # for Optional-state machines: any other machine whose state is not None
    # (a counter at 0, say) counts as finished and run() takes no steps.
    stop_when_finished: bool = False

    record_history: bool = True


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "json"


@dataclass
class EnstateConfig:
    """Complete configuration."""

    driver: DriverConfig = field(default_factory=DriverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> Result["EnstateConfig", ConfigError]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Result with loaded config or error
        """
        path = Path(path)

        if not path.exists():
            return Err(ConfigError(
                field="path",
                message=f"Configuration file not found: {path}",
            ))

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return Err(ConfigError(
                field="yaml",
                message=f"Failed to parse YAML: {e}",
            ))
        except OSError as e:
            return Err(ConfigError(
                field="file",
                message=f"Failed to read config file: {e}",
            ))

        if not isinstance(data, dict):
            return Err(ConfigError(
                field="yaml",
                message=f"Expected a mapping at top level, got {type(data).__name__}",
            ))

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result["EnstateConfig", ConfigError]:
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Result with loaded config or error
        """
        try:
            driver_data = data.get("driver") or {}
            flags = {}
            for name in DRIVER_FLAGS:
                value = driver_data.get(name, getattr(DriverConfig, name))
                if not isinstance(value, bool):
                    return Err(ConfigError(
                        field=f"driver.{name}",
                        message=f"Must be true or false, got {value!r}",
                    ))
                flags[name] = value

            max_steps = driver_data.get("max_steps")
            driver = DriverConfig(
                max_steps=int(max_steps) if max_steps is not None else None,
                **flags,
            )

            logging_data = data.get("logging") or {}
            logging_config = LoggingConfig(
                level=str(logging_data.get("level", "info")).lower(),
                format=str(logging_data.get("format", "json")).lower(),
            )
        except (AttributeError, TypeError, ValueError) as e:
            return Err(ConfigError(
                field="unknown",
                message=f"Failed to parse configuration: {e}",
            ))

        config = cls(driver=driver, logging=logging_config)

        validation_result = config.validate()
        if validation_result.is_err():
            return Err(validation_result.unwrap_err())

        return Ok(config)

    def validate(self) -> Result[None, ConfigError]:
        """
        Validate configuration values.

        Returns:
            Result indicating success or validation error
        """
        if self.driver.max_steps is not None and self.driver.max_steps < 1:
            return Err(ConfigError(
                field="driver.max_steps",
                message=f"Must be at least 1, got {self.driver.max_steps}",
            ))

        if self.logging.level not in LOG_LEVELS:
            return Err(ConfigError(
                field="logging.level",
                message=f"Must be one of {', '.join(LOG_LEVELS)}, got {self.logging.level}",
            ))

        if self.logging.format not in LOG_FORMATS:
            return Err(ConfigError(
                field="logging.format",
                message=f"Must be one of {', '.join(LOG_FORMATS)}, got {self.logging.format}",
            ))

        return Ok(None)


def load_config(path: Optional[Path] = None) -> Result[EnstateConfig, ConfigError]:
    """
    Load configuration from the standard location.

    Uses path if given, else the file named by $ENSTATE_CONFIG, else the
    built-in defaults.

    Args:
        path: Path to a YAML configuration file

    Returns:
        Result with loaded config or error
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return Ok(EnstateConfig())
        path = Path(env_path)

    return EnstateConfig.from_yaml(Path(path))
