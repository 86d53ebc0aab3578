"""
Configuration management using Pydantic models loaded from YAML.
"""

import re
from dataclasses import dataclass
from datetime import date, time
from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pendulum import Date
from pydantic import BaseModel, Field, ValidationError, field_validator

from .domain.exceptions import ConfigurationError
from .domain.models import WorkingHours

TIME_OF_DAY_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_of_day(value: str, parameter: str = "time") -> time:
    """
    Parse a 24-hour "H:MM" / "HH:MM" string.

    Raises:
        ConfigurationError: If the string is not a valid time of day
    """
    match = TIME_OF_DAY_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ConfigurationError(f"Invalid time of day {value!r}, expected HH:MM", parameter)

    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ConfigurationError(f"Time of day out of range: {value!r}", parameter)

    return time(hour=hour, minute=minute)


def parse_date(value: str, parameter: str = "date") -> Date:
    """Parse a YYYY-MM-DD string into a pendulum Date."""
    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
    except ValueError as exc:
        raise ConfigurationError(f"Invalid date {value!r}, expected YYYY-MM-DD", parameter) from exc


def _coerce_date(value: date | str, parameter: str) -> Date:
    if isinstance(value, str):
        return parse_date(value, parameter)
    if isinstance(value, Date):
        return value
    return pendulum.date(value.year, value.month, value.day)


class DefaultsConfig(BaseModel):
    """Default settings for a search."""
    start_time: str = "08:00"
    end_time: str = "17:00"
    minimum_slot_minutes: int = 30
    days_ahead: int = 7

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate the value is a HH:MM time of day."""
        try:
            parse_time_of_day(value)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("minimum_slot_minutes")
    @classmethod
    def validate_minimum(cls, value: int) -> int:
        if value < 0:
            raise ValueError("minimum_slot_minutes must not be negative")
        return value

    @field_validator("days_ahead")
    @classmethod
    def validate_days_ahead(cls, value: int) -> int:
        if value < 1:
            raise ValueError("days_ahead must be at least 1")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    client_id: str = ""
    tenant_id: str = "common"
    timezone: str = "Europe/Berlin"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    exclude_days: List[int] = Field(default_factory=list)  # on top of Saturday and Sunday
    mock_data_file: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("exclude_days")
    @classmethod
    def validate_exclude_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"exclude_days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    def get_authority_url(self) -> str:
        """Get the formatted authority URL."""
        return f"https://login.microsoftonline.com/{self.tenant_id}"

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
            ConfigurationError: If config is invalid
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
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the root level.")

        try:
            config = cls(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration in {config_path}:\n{exc}") from exc

        if config.mock_data_file is not None and not config.mock_data_file.is_absolute():
            config.mock_data_file = config_path.parent / config.mock_data_file

        return config


@dataclass(frozen=True)
class SearchParameters:
    """
    Validated inputs of a single availability search.
    """

    start_date: Date
    end_date: Date
    start_time: time
    end_time: time
    minimum_slot_minutes: int

    @classmethod
    def parse(
        cls,
        *,
        start_date: date | str,
        end_date: date | str,
        start_time: time | str,
        end_time: time | str,
        minimum_slot_minutes: int
    ) -> "SearchParameters":
        """
        Validate raw search inputs, failing fast on the first bad parameter.

        A window where start_time is not before end_time is accepted; every
        day then reports zero slots.

        Raises:
            ConfigurationError: Naming the offending parameter
        """
        start_date = _coerce_date(start_date, "start_date")
        end_date = _coerce_date(end_date, "end_date")
        if isinstance(start_time, str):
            start_time = parse_time_of_day(start_time, "start_time")
        if isinstance(end_time, str):
            end_time = parse_time_of_day(end_time, "end_time")

        if end_date < start_date:
            raise ConfigurationError(
                f"End date {end_date} is before start date {start_date}", "end_date"
            )
        if minimum_slot_minutes < 0:
            raise ConfigurationError(
                f"Minimum slot length must not be negative, got {minimum_slot_minutes}",
                "minimum_slot_minutes"
            )
        return cls(
            start_date=start_date,
            end_date=end_date,
            start_time=start_time,
            end_time=end_time,
            minimum_slot_minutes=minimum_slot_minutes,
        )

    def working_hours(self, exclude_days: List[int], timezone: str) -> WorkingHours:
        return WorkingHours(
            start_time=self.start_time,
            end_time=self.end_time,
            exclude_weekdays=list(exclude_days),
            timezone=timezone,
        )


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of gapfinder/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
