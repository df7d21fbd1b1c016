"""Runtime settings loaded from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Defaults that are not part of the crop geometry.

    Every field can be set with a ``FACECROP_`` prefixed environment variable
    (e.g. ``FACECROP_WORKERS=4``) or in a local ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FACECROP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Batch
    workers: int = Field(default=1, ge=1)

    # Output encoding
    jpeg_quality: int = Field(default=95, ge=1, le=100)

    # Haar cascade detector
    cascade_file: str = "haarcascade_frontalface_default.xml"
    scale_factor: float = Field(default=1.1, gt=1.0)
    min_neighbors: int = Field(default=5, ge=0)
    min_face_size: int = Field(default=30, ge=1)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
