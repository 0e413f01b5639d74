"""Application configuration using pydantic-settings.

All environment variables should be accessed through the settings object
rather than using os.getenv() directly.
"""

from datetime import timezone, tzinfo
from decimal import Decimal
from functools import lru_cache
from typing import List, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./tableside.db"

    # Security
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 240  # 4 hours

    # CORS - comma-separated origins or "*" for development only
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    # Server
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Rate limiting
    rate_limit_enabled: bool = True

    # ==========================================================================
    # Ordering
    # ==========================================================================
    gst_rate: Decimal = Decimal("0.18")
    currency_symbol: str = "₹"
    max_tables_per_booking: int = 10

    # Sign-up is restricted to a single webmail domain
    allowed_email_domain: str = "gmail.com"

    # Support contact
    support_whatsapp_number: str = "919876543210"
    support_whatsapp_message: str = "Hi, I need help with my order."

    # Business timezone used for revenue bucketing ("UTC" or an IANA name)
    timezone: str = "UTC"

    @field_validator("gst_rate")
    @classmethod
    def validate_gst_rate(cls, v: Decimal) -> Decimal:
        if v < 0 or v > 1:
            raise ValueError("gst_rate must be between 0 and 1")
        return v

    @field_validator("max_tables_per_booking")
    @classmethod
    def validate_max_tables(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_tables_per_booking must be at least 1")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Refuse to start in production mode with the default secret."""
        if not self.debug and self.secret_key == "change-me-in-production":
            raise ValueError(
                "FATAL: Cannot start in production mode with default SECRET_KEY. "
                "Set a secure SECRET_KEY environment variable (minimum 32 characters)."
            )
        return self

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def business_tz(self) -> tzinfo:
        """Timezone revenue buckets are computed in."""
        if self.timezone.upper() == "UTC":
            return timezone.utc
        from zoneinfo import ZoneInfo
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
