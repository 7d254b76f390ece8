"""Configuration management for component-validator using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_FILE_NAME = ".component-validator.json"


class OutputFormat(str, Enum):
    """Output format types."""
    TABLE = "table"
    JSON = "json"
    MARKDOWN = "markdown"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class InputConfig(BaseModel):
    """Input configuration section."""
    path: str = "config/carvel.yaml"


class PolicyConfig(BaseModel):
    """Schema variations applied to the built-in kinds."""
    forbid_component_in_name: bool = Field(alias="forbidComponentInName", default=False)
    security_context_fail_fast: bool = Field(alias="securityContextFailFast", default=False)

    model_config = ConfigDict(populate_by_name=True)


class EngineConfig(BaseModel):
    """Engine configuration section."""
    max_workers: int = Field(alias="maxWorkers", default=1)

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v):
        if v < 1:
            raise ValueError("max_workers must be >= 1")
        return v

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.TABLE

    model_config = ConfigDict(use_enum_values=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO

    model_config = ConfigDict(use_enum_values=True)


class ValidatorConfig(BaseModel):
    """Complete component-validator configuration model."""
    input: InputConfig = Field(default_factory=InputConfig)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> ValidatorConfig:
    """Load the validator settings, or the defaults when no settings file exists.

    A missing file is not an error: validation then runs against
    ``config/carvel.yaml`` with every policy switch off.

    Args:
        config_path: Settings file to read. If None, the nearest
                    .component-validator.json in the working directory or its
                    parents is used

    Raises:
        ValueError: If the file is not JSON or does not describe a ValidatorConfig
    """
    config_path = find_config_file() if config_path is None else Path(config_path)
    if config_path is None or not config_path.exists():
        return ValidatorConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e

    try:
        return ValidatorConfig.model_validate(config_data)
    except ValidationError as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest .component-validator.json at or above ``start_dir``."""
    current = Path(start_dir or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        config_file = directory / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file
    return None
