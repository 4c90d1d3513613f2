"""Application configuration from environment variables."""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(
        default="sqlite:///./utility_billing.db",
        description="SQLAlchemy connection string",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Server log file path")

    # API
    api_title: str = Field(default="Utility Billing API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")

    # Billing
    penalty_rate: Decimal = Field(
        default=Decimal("0.015"), ge=0, description="Late surcharge applied after the due day"
    )
    bill_due_day: int = Field(default=15, ge=1, le=28, description="Day of month bills fall due")
    fiscal_year_start_month: int = Field(
        default=4, ge=1, le=12, description="Month the export carry-forward resets"
    )

    # Pagination
    default_page_size: int = Field(default=50, ge=1, description="Default list page size")
    max_page_size: int = Field(default=500, ge=1, description="Largest accepted page size")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
