"""Application configuration."""
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Environment variables take precedence over .env file.
    This makes it compatible with Docker (uses env vars) and
    local development (uses .env file).
    """

    APP_NAME: str = "Box Organizer"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./box_organizer.db"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Generated identifiers (box short ids, QR tokens)
    SHORT_ID_MAX_ATTEMPTS: int = 10
    QR_TOKEN_PREFIX: str = Field("QR", pattern=r"^[A-Z]{2}$")

    model_config = SettingsConfigDict(
        # Only load .env file if it exists (for local dev)
        # Docker will use environment variables directly
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
