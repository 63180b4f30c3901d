from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Optional
import sys


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below

    LOG_API_URL and AUTH_TOKEN have no defaults: the service refuses
    to start without the log collector credentials.
    """

    # Environment
    environment: str = "development"
    debug: bool = False

    # Application
    app_name: str = "URL Shortener"
    app_version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    public_scheme: str = "http"  # Scheme used when building shortLink
    cors_origins: List[str] = ["*"]

    # URL Shortener specific
    default_validity_minutes: int = 30
    short_url_length: int = 6
    max_retries: int = 5

    # URL store settings
    url_store_backend: str = "memory"  # Options: "memory"
    expired_retention_minutes: Optional[int] = Field(None, ge=0)  # None keeps expired links forever
    sweep_interval_seconds: float = Field(60, gt=0)

    # Event logging (remote log collector)
    event_log_backend: str = "http"  # Options: "http", "memory", "null"
    log_api_url: str = Field(..., min_length=1)
    auth_token: str = Field(..., min_length=1)
    log_stack: Literal["backend", "frontend"] = "backend"
    log_timeout_seconds: float = 5.0

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


def load_settings() -> Settings:
    """Load settings, exiting the process if the log credentials are missing."""
    try:
        return Settings()
    except ValidationError as e:
        print("❌ Missing required environment variables: AUTH_TOKEN and/or LOG_API_URL")
        print(e)
        sys.exit(1)


# Create settings instance
settings = load_settings()
