"""
Application settings and configuration management using Pydantic Settings.
"""
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    app_name: str = Field(default="K2 Barber Booking", description="Application name")
    app_env: str = Field(default="development", description="Environment (development, staging, production)")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    api_v1_prefix: str = Field(default="/api/v1", description="Prefix for versioned API routes")

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./barber_bookings.db",
        description="Database connection URL"
    )

    # Business Configuration
    business_name: str = Field(default="K2 Barber", description="Business name used in messages")
    business_timezone: str = Field(default="Europe/Budapest", description="Business local timezone")
    business_phone: str = Field(default="+36 30 000 0000", description="Business contact phone")
    business_website: str = Field(default="k2barber.hu", description="Business website shown in messages")

    # Availability Configuration
    availability_file: Optional[str] = Field(
        default=None,
        description="Path to a JSON availability policy; built-in calendar is used when unset"
    )
    booking_horizon_days: Optional[int] = Field(
        default=92, ge=1, description="How many days ahead bookings are accepted"
    )

    # Notification Configuration
    notifications_enabled: bool = Field(default=True, description="Dispatch booking notifications")
    sms_enabled: bool = Field(default=False, description="Deliver SMS through Twilio instead of logging")
    twilio_account_sid: str = Field(default="", description="Twilio Account SID")
    twilio_auth_token: str = Field(default="", description="Twilio Auth Token")
    twilio_phone_number: str = Field(default="", description="Twilio sender phone number")

    # CORS Settings
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="Allowed CORS origins (comma-separated)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed_levels:
            raise ValueError(f"log_level must be one of {allowed_levels}")
        return v_upper

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(f"app_env must be one of {allowed_envs}")
        return v_lower

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    @property
    def sms_configured(self) -> bool:
        """Check whether all Twilio credentials are present."""
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number)


# Global settings instance
settings = Settings()
