"""Application configuration."""
from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from ``YOBI_``-prefixed environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="YOBI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    store_backend: Literal["firebase", "memory"] = "firebase"

    # Firebase
    firebase_database_url: str = ""
    firebase_project_id: str = ""
    firebase_credentials_path: Optional[str] = None  # Falls back to application default credentials
    firebase_app_name: str = "yobi"

    # Admin
    admin_api_key: Optional[str] = None

    # Catalog rules
    unique_control_keys: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    def missing_firebase_keys(self) -> List[str]:
        """Names of the Firebase settings that are required but empty."""
        required = {
            "firebase_database_url": self.firebase_database_url,
            "firebase_project_id": self.firebase_project_id,
        }
        return [name for name, value in required.items() if not value]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
