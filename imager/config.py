"""
Configuration management for the imager service.
Uses pydantic-settings for environment-based configuration.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from imager.schemas.variant import VariantSpec


def _default_variants() -> dict[str, VariantSpec]:
    return {
        "default": VariantSpec(
            resize={"thumb": "100x100"},
            crop={"square": "50x50"},
        ),
    }


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Settings
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Imager"
    DEBUG: bool = False
    CORS_ORIGINS: str = "*"

    # Storage backends, comma separated, in registration order
    STORAGE_BACKENDS: str = "local"

    # Prefix shared by every backend (directory for local, key prefix for remote)
    UPLOAD_DIRECTORY: str = ""

    # Local Storage Settings
    LOCAL_STORAGE_PATH: str = "./storage"
    LOCAL_BASE_URI: str | None = None  # falls back to LOCAL_STORAGE_PATH
    LOCAL_FILE_MODE: int = 0o644

    # S3/MinIO Settings
    S3_ENDPOINT_URL: str | None = None
    S3_ACCESS_KEY: str | None = None
    S3_SECRET_KEY: str | None = None
    S3_BUCKET_NAME: str = "imager-uploads"
    S3_REGION: str = "us-east-1"
    S3_STORAGE_CLASS: str | None = None
    S3_ACL: str = "public-read"

    # CDN container settings (Azure Blob container fronted by a CDN)
    CDN_CONNECTION_STRING: str | None = None
    CDN_CONTAINER_NAME: str = "imager-uploads"
    CDN_URI: str | None = None
    CDN_SSL_URI: str | None = None
    CDN_STREAMING_URI: str | None = None

    # Variant sets, JSON encoded in the environment
    VARIANTS: dict[str, VariantSpec] = Field(default_factory=_default_variants)
    DEFAULT_VARIANT: str | None = "default"

    # Derived artifacts are written here; system temp dir when unset
    TEMP_DIRECTORY: str | None = None

    # File Upload Limits
    MAX_UPLOAD_SIZE: int = 20 * 1024 * 1024  # 20MB

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def storage_backend_names(self) -> list[str]:
        """Configured backend type names, lowercased and in order."""
        return [
            name.strip().lower()
            for name in self.STORAGE_BACKENDS.split(",")
            if name.strip()
        ]

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
