"""Core module - Configuration, logging, constants and exceptions.

Exports:
    - Settings, get_settings: Pydantic Settings configuration
    - configure_logging, get_logger: Structured logging (structlog)
    - IMPLICIT_CACHE_SIZE: Default implicit cache capacity
    - Exception classes: ProjectCacheError, CacheConfigurationError
"""

from project_cache.core.config import Settings, get_settings
from project_cache.core.constants import IMPLICIT_CACHE_SIZE
from project_cache.core.exceptions import CacheConfigurationError, ProjectCacheError
from project_cache.core.logging import configure_logging, get_logger


__all__ = [
    "IMPLICIT_CACHE_SIZE",
    # Exceptions
    "CacheConfigurationError",
    "ProjectCacheError",
    # Configuration
    "Settings",
    # Logging
    "configure_logging",
    "get_logger",
    "get_settings",
]
