"""Configuration management for Divify."""

from decimal import Decimal
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DIVIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Settlement settings
    # Balances below this are settled
    settle_tolerance: Decimal = Field(default=Decimal("0.01"), gt=0)
    rounding: Literal["half_up", "half_even"] = "half_up"

    # Group settings
    default_name_template: str = "Person {n}"  # {n} is the 1-based position
    min_participants: int = Field(default=2, ge=1)
    default_participant_count: int = Field(default=2, ge=1)

    @field_validator("default_name_template")
    @classmethod
    def check_name_template(cls, value: str) -> str:
        """The template may only use the {n} placeholder."""
        try:
            value.format(n=1)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"default_name_template must only use the {{n}} placeholder: {e!r}"
            ) from e
        return value

    @model_validator(mode="after")
    def check_group_size(self) -> "Settings":
        if self.default_participant_count < self.min_participants:
            raise ValueError(
                f"default_participant_count ({self.default_participant_count}) "
                f"is below min_participants ({self.min_participants})"
            )
        return self


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the DIVIFY_* variables in your "
            f"environment or .env file.\n"
            f"Error: {e}"
        ) from e
