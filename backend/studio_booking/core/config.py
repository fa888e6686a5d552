# backend/studio_booking/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Deployment environment name",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    database_url: str = Field(
        default="sqlite:///./studio_booking.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False

    # Payment gateway
    payment_gateway: Literal["stripe", "fake"] = Field(
        default="stripe",
        description="Which gateway implementation to use (fake is for local/test only)",
    )
    stripe_secret_key: SecretStr = Field(
        default=SecretStr(""),
        description="Stripe secret API key",
    )
    stripe_currency: str = Field(default="usd", description="Default currency for payments")
    stripe_timeout_seconds: int = Field(
        default=8,
        ge=1,
        description="Network timeout for a single gateway call",
    )

    # Booking creation critical section
    booking_lock_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="How long a booking request waits for the studio lock before giving up",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        if value is None:
            return "INFO"
        normalized = str(value).strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return normalized

    @field_validator("stripe_currency", mode="before")
    @classmethod
    def _normalize_currency(cls, value: object) -> str:
        return str(value or "usd").strip().lower()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def get_database_url(self) -> str:
        """Return the database URL, refusing the default SQLite file in production."""
        if self.is_production and self.is_sqlite:
            raise ValueError("DATABASE_URL must point at a server database in production")
        return self.database_url


settings = Settings()
