"""Cache configuration using Pydantic Settings.

Environment variables are loaded with the PROJECT_CACHE_ prefix, e.g.
PROJECT_CACHE_IMPLICIT_CACHE_SIZE=5.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from project_cache.core.constants import IMPLICIT_CACHE_SIZE


class Settings(BaseSettings):
    """Cache settings loaded from environment variables."""

    # Service configuration
    service_name: str = "project-cache"
    environment: str = Field(default="development", description="Runtime environment")
    log_level: str = Field(default="INFO", description="Logging level")

    # Implicit (ownerless) cache
    implicit_cache_enabled: bool = Field(
        default=True,
        description="Retain ownerless artifacts in the bounded implicit cache"
    )
    implicit_cache_size: int = Field(
        default=IMPLICIT_CACHE_SIZE,
        ge=1,
        description="Number of artifacts the implicit cache retains"
    )
    implicit_cache_idle_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Clear the implicit cache after this long without offers"
    )

    model_config = SettingsConfigDict(
        env_prefix="PROJECT_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Process-wide settings
    """
    return Settings()
