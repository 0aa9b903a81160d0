"""Custom exceptions for the project cache.

Caching is a best-effort side channel: offering an artifact never raises.
The exceptions here only surface at construction time, when the cache is
misconfigured.
"""

from typing import Any


class ProjectCacheError(Exception):
    """Base exception for all project cache errors.

    All cache exceptions inherit from this class to enable
    catching any cache error with a single except clause.
    """


class CacheConfigurationError(ProjectCacheError):
    """Raised when a cache component is built with an invalid setting."""

    def __init__(self, message: str, setting: str, value: Any | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error description
            setting: Name of the offending setting
            value: The rejected value
        """
        self.setting = setting
        self.value = value
        super().__init__(message)
