"""Shared configuration definitions for the portal services."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore[import-not-found]


class SharedSettings(BaseSettings):
    """Global defaults and environment-driven overrides for all services."""

    # Environment
    APP_ENV: str = "development"

    # Portal API defaults
    PORTAL_SERVICE_NAME: str = "Scout Portal API"
    PORTAL_SERVICE_VERSION: str = "1.0.0"
    PORTAL_SERVICE_HOST: str = "0.0.0.0"
    PORTAL_SERVICE_PORT: int = 3001
    PORTAL_DEBUG: bool = True
    PORTAL_STORAGE_DIR: str = str(Path("portal") / "uploads")
    PORTAL_SEED_DATA_DIR: str = str(Path("portal") / "data")
    PORTAL_CORS_ORIGINS: str = "*"

    # MongoDB defaults
    MONGODB_URI: str = "mongodb://localhost:27017/"
    DATABASE_NAME: str = "scout_portal"

    # Access tokens
    JWT_SECRET_KEY: str = "scout-portal-development-secret-key-change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parent.parent / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )


shared_settings = SharedSettings()
