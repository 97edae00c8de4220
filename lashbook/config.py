"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from rich.logging import RichHandler

from .domain.models import Break, ProviderProfile, Service, TimeInterval, WorkingWindow
from .domain.timeutils import to_minutes


def _validate_time(value: str) -> str:
    to_minutes(value)
    return value


class BookingSettings(BaseModel):
    """Rules applied when booking."""
    slot_minutes: int = 30
    max_advance_booking_days: int = 30
    enforce_working_hours: bool = True

    @field_validator("slot_minutes")
    @classmethod
    def validate_slot_minutes(cls, value: int) -> int:
        """Ensure slots have a positive length."""
        if value <= 0:
            raise ValueError("slot_minutes must be greater than zero")
        return value

    @field_validator("max_advance_booking_days")
    @classmethod
    def validate_advance_days(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_advance_booking_days must be at least 1")
        return value


class WhatsAppSettings(BaseModel):
    """WhatsApp Cloud API credentials."""
    enabled: bool = False
    access_token: str = ""
    phone_number_id: str = ""
    api_version: str = "v18.0"

    def is_configured(self) -> bool:
        """Check if messages can be sent."""
        return self.enabled and bool(self.access_token and self.phone_number_id)


class EmailSettings(BaseModel):
    """SMTP settings for confirmation emails."""
    enabled: bool = False
    host: str = ""
    port: int = 587
    use_tls: bool = True
    username: str = ""
    password: str = ""
    from_email: str = ""
    from_name: str = "lashbook"

    def is_configured(self) -> bool:
        """Check if emails can be sent."""
        return self.enabled and bool(self.host and self.username and self.password)


class ContactConfig(BaseModel):
    """How to reach a user."""
    whatsapp_number: str = ""
    email: str = ""


class WorkingHoursConfig(BaseModel):
    """Working hours for one weekday (0=Sunday, 6=Saturday)."""
    day: int
    start: str
    end: str
    is_working: bool = True

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: int) -> int:
        if value not in range(7):
            raise ValueError(f"day must be between 0 and 6, got {value}")
        return value

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _validate_time(value)

    @model_validator(mode="after")
    def validate_order(self) -> "WorkingHoursConfig":
        """Ensure the window opens before it closes."""
        if to_minutes(self.end) <= to_minutes(self.start):
            raise ValueError(f"end ({self.end}) must be later than start ({self.start})")
        return self


class BreakConfig(BaseModel):
    """A daily break."""
    start: str
    end: str
    description: str = ""

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _validate_time(value)

    @model_validator(mode="after")
    def validate_order(self) -> "BreakConfig":
        if to_minutes(self.end) <= to_minutes(self.start):
            raise ValueError(f"Break end ({self.end}) must be later than start ({self.start})")
        return self


class ServiceConfig(BaseModel):
    """A bookable service."""
    id: str
    name: str
    duration: int = Field(ge=15)
    price: float = Field(ge=0)
    description: str = ""
    is_active: bool = True


class ProviderConfig(BaseModel):
    """Provider (lashista) profile configuration."""
    id: str
    studio_name: str = ""
    whatsapp_number: str = ""
    email: str = ""
    deposit_amount: float = Field(default=0.0, ge=0)
    working_hours: List[WorkingHoursConfig] = Field(default_factory=list)
    breaks: List[BreakConfig] = Field(default_factory=list)
    services: List[ServiceConfig] = Field(default_factory=list)

    @field_validator("working_hours")
    @classmethod
    def validate_unique_days(cls, value: List[WorkingHoursConfig]) -> List[WorkingHoursConfig]:
        """Ensure there is at most one entry per weekday."""
        seen: set[int] = set()
        for entry in value:
            if entry.day in seen:
                raise ValueError(f"Duplicate working hours for day {entry.day}")
            seen.add(entry.day)
        return value

    @field_validator("services")
    @classmethod
    def validate_unique_services(cls, value: List[ServiceConfig]) -> List[ServiceConfig]:
        ids = [service.id for service in value]
        if len(ids) != len(set(ids)):
            raise ValueError("Service ids must be unique per provider")
        return value

    def to_profile(self) -> ProviderProfile:
        """Convert to the domain profile."""
        return ProviderProfile(
            provider_id=self.id,
            studio_name=self.studio_name,
            deposit_amount=self.deposit_amount,
            services=[
                Service(
                    id=service.id,
                    name=service.name,
                    duration=service.duration,
                    price=service.price,
                    description=service.description,
                    is_active=service.is_active,
                )
                for service in self.services
            ],
            working_hours=[
                WorkingWindow(
                    weekday=entry.day,
                    window=TimeInterval.parse(entry.start, entry.end),
                    is_working=entry.is_working,
                )
                for entry in self.working_hours
            ],
            breaks=[
                Break(
                    interval=TimeInterval.parse(brk.start, brk.end),
                    description=brk.description,
                )
                for brk in self.breaks
            ],
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/Santiago"
    log_level: str = "INFO"
    booking: BookingSettings = Field(default_factory=BookingSettings)
    whatsapp: WhatsAppSettings = Field(default_factory=WhatsAppSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    providers: List[ProviderConfig] = Field(default_factory=list)
    clients: Dict[str, ContactConfig] = Field(default_factory=dict)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("providers")
    @classmethod
    def validate_providers(cls, value: List[ProviderConfig]) -> List[ProviderConfig]:
        """Ensure provider ids are unique."""
        seen: set[str] = set()
        for provider in value:
            if provider.id in seen:
                raise ValueError(f"Duplicate provider id detected: {provider.id}")
            seen.add(provider.id)
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

    def find_provider(self, provider_id: str) -> Optional[ProviderConfig]:
        """Find a provider by id (case-insensitive)."""
        for provider in self.providers:
            if provider.id.lower() == provider_id.lower():
                return provider
        return None

    def profiles(self) -> List[ProviderProfile]:
        return [provider.to_profile() for provider in self.providers]

    def whatsapp_contacts(
        self,
        clients: Optional[Mapping[str, ContactConfig]] = None
    ) -> Dict[str, str]:
        """Map user ids (providers and clients) to their WhatsApp numbers."""
        return self._contacts("whatsapp_number", clients)

    def email_contacts(
        self,
        clients: Optional[Mapping[str, ContactConfig]] = None
    ) -> Dict[str, str]:
        """Map user ids (providers and clients) to their email addresses."""
        return self._contacts("email", clients)

    def _contacts(
        self,
        field: str,
        clients: Optional[Mapping[str, ContactConfig]]
    ) -> Dict[str, str]:
        contacts = {
            provider.id: getattr(provider, field)
            for provider in self.providers
            if getattr(provider, field)
        }
        for user_id, contact in {**self.clients, **(clients or {})}.items():
            if getattr(contact, field):
                contacts[user_id] = getattr(contact, field)
        return contacts


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def configure_logging(level: str = "INFO") -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
