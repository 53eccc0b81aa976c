"""
Configuration management for the phone OTP auth backend.

Centralizes all configuration using Pydantic settings with environment variable support.
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Cognito Configuration
    cognito_region: str = Field(
        default="us-east-1",
        description="AWS region of the Cognito user pool"
    )
    cognito_user_pool_id: str = Field(
        default="",
        description="Cognito user pool ID"
    )
    cognito_app_client_id: str = Field(
        default="",
        description="Cognito app client ID (public client, no secret)"
    )

    # OTP Flow
    otp_max_sign_in_attempts: int = Field(
        default=3,
        ge=1,
        description="Sign-in calls allowed per phone submission, including recovery retries"
    )
    auth_probe_on_startup: bool = Field(
        default=True,
        description="Run the 'am I signed in' probe once after startup"
    )
    auth_probe_delay_seconds: float = Field(
        default=1.5,
        ge=0,
        description="Delay before the startup probe runs"
    )

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8000,
        description="API server port"
    )

    # Application Settings
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Returns:
        Settings: Application settings
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None


def validate_required_settings():
    """
    Validate that all required settings are present at runtime.

    Should be called after settings are loaded but before application starts.
    Raises ValueError if required settings are missing.
    """
    settings = get_settings()

    if not settings.cognito_app_client_id:
        raise ValueError(
            "COGNITO_APP_CLIENT_ID environment variable is required but not set. "
            "Point it at the app client of the phone OTP user pool."
        )

    return True
