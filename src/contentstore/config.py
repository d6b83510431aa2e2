"""Environment-driven configuration for content stores."""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from contentstore.storage._store import normalize_upload_path, validate_hash_algorithm


class StoreSettings(BaseSettings):
    """Content store settings loaded from ``CONTENTSTORE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONTENTSTORE_",
        case_sensitive=False,
        extra="ignore",
    )

    storage_root: Path
    upload_path: str
    hash_algorithm: str = "md5"

    @field_validator("upload_path")
    @classmethod
    def check_upload_path(cls, value: str) -> str:
        """Normalize the upload path segment."""
        return normalize_upload_path(value)

    @field_validator("hash_algorithm")
    @classmethod
    def check_hash_algorithm(cls, value: str) -> str:
        """Ensure the algorithm exists and is at least 128 bits wide."""
        return validate_hash_algorithm(value.lower())
