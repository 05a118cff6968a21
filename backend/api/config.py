"""
API server configuration using Pydantic Settings.

Server, logging and CORS settings only; domain settings (tokens, OTP,
storage) live in ``shared.config``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """Uvicorn and CORS settings, read from ``SPRINTDESK_*`` variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SPRINTDESK_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    reload: bool = False

    log_level: str = "info"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    # The refresh cookie needs credentialed CORS, so origins must be explicit
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["GET", "POST", "PATCH", "OPTIONS"]
    cors_allow_headers: list[str] = ["Authorization", "Content-Type"]


def get_settings() -> APISettings:
    return APISettings()
