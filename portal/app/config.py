from pathlib import Path
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.shared_settings import shared_settings

ROOT_DIR = Path(__file__).resolve().parents[2]
SERVICE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Configuration for the portal API service."""

    SERVICE_NAME: str = shared_settings.PORTAL_SERVICE_NAME
    SERVICE_VERSION: str = shared_settings.PORTAL_SERVICE_VERSION
    APP_HOST: str = Field(
        default=shared_settings.PORTAL_SERVICE_HOST,
        validation_alias=AliasChoices("HOST", "APP_HOST"),
    )
    APP_PORT: int = Field(
        default=shared_settings.PORTAL_SERVICE_PORT,
        validation_alias=AliasChoices("PORT", "APP_PORT"),
    )
    APP_ENV: str = shared_settings.APP_ENV
    DEBUG: bool = Field(
        default=shared_settings.PORTAL_DEBUG,
        validation_alias=AliasChoices("DEBUG", "APP_DEBUG"),
    )

    # MongoDB
    MONGODB_URI: str = Field(
        default=shared_settings.MONGODB_URI,
        validation_alias=AliasChoices("MONGODB_URI", "MONGO_URL"),
    )
    DATABASE_NAME: str = Field(
        default=shared_settings.DATABASE_NAME,
        validation_alias=AliasChoices("DATABASE_NAME", "MONGO_DB"),
    )
    MONGO_TIMEOUT_MS: int = 5000
    USERS_COLLECTION: str = "users"
    CAMPS_COLLECTION: str = "camps"
    NEWS_COLLECTION: str = "news_articles"
    DOCUMENTS_COLLECTION: str = "documents"
    ISSUES_COLLECTION: str = "magazine_issues"

    # Blob storage
    STORAGE_ROOT: Path = Field(
        default=Path(shared_settings.PORTAL_STORAGE_DIR),
        validation_alias=AliasChoices("STORAGE_ROOT", "UPLOAD_ROOT"),
    )
    MAX_UPLOAD_SIZE_MB: int = Field(default=10, validation_alias="MAX_UPLOAD_SIZE_MB")
    UPLOAD_CHUNK_SIZE: int = 1024 * 1024

    # Access tokens
    JWT_SECRET_KEY: str = Field(
        default=shared_settings.JWT_SECRET_KEY,
        validation_alias=AliasChoices("JWT_SECRET_KEY", "SECRET_KEY"),
    )
    JWT_ALGORITHM: str = shared_settings.JWT_ALGORITHM
    ACCESS_TOKEN_EXPIRE_MINUTES: int = shared_settings.ACCESS_TOKEN_EXPIRE_MINUTES

    SEED_DATA_DIR: Path = Path(shared_settings.PORTAL_SEED_DATA_DIR)

    CORS_ORIGINS: str = shared_settings.PORTAL_CORS_ORIGINS
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(
        env_file=[str(SERVICE_DIR / ".env"), str(ROOT_DIR / ".env")],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def storage_root_path(self) -> Path:
        return self._resolve_service_path(self.STORAGE_ROOT)

    @property
    def seed_data_path(self) -> Path:
        return self._resolve_service_path(self.SEED_DATA_DIR)

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @staticmethod
    def _resolve_service_path(value: Path) -> Path:
        path = Path(value)
        if path.is_absolute():
            return path

        parts = path.parts
        if parts and parts[0].lower() == "portal":
            path = Path(*parts[1:]) if len(parts) > 1 else Path()

        return (SERVICE_DIR / path).resolve()


settings = Settings()
