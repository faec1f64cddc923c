"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.code_generator import DEFAULT_CODE_LENGTH, DEFAULT_MAX_CODE_ATTEMPTS
from .domain.slot_generator import DEFAULT_TIMEZONE


class DefaultsConfig(BaseModel):
    """Default daily window offered when creating a meeting."""
    start_time: str = "09:00"
    end_time: str = "17:00"

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        try:
            pendulum.from_format(value, "HH:mm")
        except ValueError as exc:
            raise ValueError(f"Time must be HH:MM, got {value!r}") from exc
        return value

    @model_validator(mode="after")
    def validate_window_order(self) -> "DefaultsConfig":
        """Ensure the configured window does not close before it opens."""
        if self.get_end_time() < self.get_start_time():
            raise ValueError("end_time must not be earlier than start_time")
        return self

    def get_start_time(self) -> time:
        """Get start time as time object."""
        return pendulum.from_format(self.start_time, "HH:mm").time()

    def get_end_time(self) -> time:
        """Get end time as time object."""
        return pendulum.from_format(self.end_time, "HH:mm").time()


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = DEFAULT_TIMEZONE
    code_length: int = DEFAULT_CODE_LENGTH
    max_code_attempts: int = DEFAULT_MAX_CODE_ATTEMPTS
    store_path: Path = Path("meetsync_data.json")
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the zone name is a known IANA timezone."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @field_validator("code_length")
    @classmethod
    def validate_code_length(cls, value: int) -> int:
        """Keep codes short enough to share and long enough to be unguessable."""
        if not 4 <= value <= 12:
            raise ValueError(f"code_length must be between 4 and 12, got {value}")
        return value

    @field_validator("max_code_attempts")
    @classmethod
    def validate_attempts(cls, value: int) -> int:
        """At least one code must be tried."""
        if value < 1:
            raise ValueError("max_code_attempts must be at least 1")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of meetsync/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Load an explicit config file, or the default one if present.

    Without an explicit path, a missing default file means built-in defaults.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()
