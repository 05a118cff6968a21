"""
Centralized configuration for the SprintDesk backend.

All settings are loaded from environment variables with sensible defaults.
Settings are grouped by concern (JWT_*, OTP_*, SMTP_*, SUPABASE_*).
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SprintDesk API"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False

    # Persistence
    storage_backend: Literal["memory", "supabase"] = "memory"
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""

    # Access tokens
    jwt_secret: str = "dev_secret"
    jwt_algorithm: str = "HS256"
    access_token_ttl_minutes: int = 15

    # Refresh tokens
    refresh_token_ttl_days: int = 7
    refresh_cookie_name: str = "refresh_token"
    refresh_cookie_path: str = "/api/auth"

    # Password hashing
    bcrypt_rounds: int = 12

    # OAuth identity tokens
    google_client_id: str = ""

    # One-time codes
    otp_ttl_minutes: int = 10
    otp_max_attempts: int = 5
    otp_code_length: int = 6

    # SMTP transport for one-time codes
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""

    # Workspaces
    invite_ttl_days: int = 7
    app_base_url: str = "http://localhost:5173"

    # Demo accounts
    demo_mode: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def smtp_enabled(self) -> bool:
        return bool(
            self.smtp_host
            and self.smtp_port
            and self.smtp_user
            and self.smtp_password
            and self.smtp_from
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
