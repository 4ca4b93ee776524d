"""Application configuration using pydantic-settings."""

from datetime import time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stayledger.core.clock import OperatingCalendar
from stayledger.core.enums import RefundPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "StayLedger"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database (SQLite for local work, PostgreSQL via asyncpg in deployment)
    database_url: str = "sqlite+aiosqlite:///./stayledger.db"

    # Operating calendar
    default_currency: str = "NGN"
    operating_timezone: str = "Africa/Lagos"
    standard_check_time: time = time(12, 0)

    # Checkout
    default_refund_policy: RefundPolicy = RefundPolicy.NO_REFUND

    # Frontend
    frontend_url: str = "http://localhost:5173"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    @field_validator("operating_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("default_currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _ensure_frontend_in_cors(self) -> "Settings":
        """Ensure the configured frontend_url is always in cors_origins."""
        if self.frontend_url and self.frontend_url not in self.cors_origins:
            self.cors_origins.append(self.frontend_url)
        return self

    @property
    def async_database_url(self) -> str:
        """Ensure a PostgreSQL URL uses the asyncpg driver."""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def operating_calendar(self) -> OperatingCalendar:
        return OperatingCalendar.from_names(self.operating_timezone, self.standard_check_time)


settings = Settings()
