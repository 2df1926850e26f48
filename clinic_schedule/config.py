"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import date, datetime
from pathlib import Path
from typing import List, Optional
from uuid import UUID

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import ConfigError
from .domain.models import Doctor, Patient, Room, ScheduleEntry, ScheduleSnapshot, Specialization

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_instant(value: str, timezone: str) -> pendulum.DateTime:
    """
    Parse a date time, reading it in the given timezone.

    Raises:
        ConfigError: If the value cannot be parsed or is not a date time
            (e.g. a duration such as "P1D" or a bare time)
    """
    try:
        parsed = pendulum.parse(value, tz=timezone)
    except ValueError as exc:
        raise ConfigError(f"Cannot parse time {value!r}: {exc}") from exc

    if not isinstance(parsed, pendulum.DateTime):
        raise ConfigError(f"Expected a date time, got {type(parsed).__name__} for {value!r}")
    return parsed


class EntryConfig(BaseModel):
    """One seeded schedule entry."""
    doctor: Specialization = Specialization.SURGEON
    start: str  # ISO date time, e.g. 2024-11-25 10:00
    end: str
    room: str
    patient: Optional[str] = None  # empty means on call

    @field_validator("start", "end", mode="before")
    @classmethod
    def stringify_times(cls, value):
        """Accept unquoted YAML timestamps as well as strings."""
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return value

    def to_entry(self, timezone: str) -> ScheduleEntry:
        """
        Build the domain entry, reading times in the given timezone.

        Raises:
            ConfigError: If a time cannot be parsed as a date time
            InvalidRangeError: If start is not before end
        """
        start = parse_instant(self.start, timezone)
        end = parse_instant(self.end, timezone)

        return ScheduleEntry(
            doctor=Doctor(self.doctor),
            start=start,
            end=end,
            room=Room(self.room),
            patient=Patient(self.patient) if self.patient else None,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    clinic_id: UUID
    timezone: str = "Europe/Berlin"
    log_level: str = "WARNING"
    rooms: List[str] = Field(default_factory=list)
    entries: List[EntryConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalise the log level name."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value}")
        return level

    @field_validator("rooms")
    @classmethod
    def validate_rooms(cls, value: List[str]) -> List[str]:
        """Ensure room names are unique."""
        seen: set[str] = set()
        for name in value:
            if name in seen:
                raise ValueError(f"Duplicate room name detected: {name}")
            seen.add(name)
        return value

    @model_validator(mode="after")
    def validate_entry_rooms(self) -> "AppConfig":
        """Ensure every seeded entry uses a configured room, if rooms are configured."""
        if self.rooms:
            unknown = sorted({entry.room for entry in self.entries} - set(self.rooms))
            if unknown:
                raise ValueError(f"Entries use unknown room(s): {', '.join(unknown)}")
        return self

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
                f"Please create a clinic.yaml file. See clinic.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def build_snapshot(self) -> ScheduleSnapshot:
        """Build the clinic's schedule snapshot from the seeded entries."""
        return ScheduleSnapshot(
            clinic_id=self.clinic_id,
            entries=[entry.to_entry(self.timezone) for entry in self.entries],
        )


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for clinic.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "clinic.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "clinic.yaml"

    return config_path
