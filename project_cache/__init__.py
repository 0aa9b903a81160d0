"""Lifetime-aware cache for large, expensive-to-recompute artifacts."""

from project_cache.cache import (
    CachedObjectOwner,
    CacheScope,
    CacheStats,
    LiveProjectSetProvider,
    Owner,
    OwnerKind,
    ProjectCacheService,
    WorkspaceProjectSet,
)
from project_cache.core import CacheConfigurationError, ProjectCacheError


__version__ = "0.1.0"

__all__ = [
    "CacheConfigurationError",
    "CacheScope",
    "CacheStats",
    "CachedObjectOwner",
    "LiveProjectSetProvider",
    "Owner",
    "OwnerKind",
    "ProjectCacheError",
    "ProjectCacheService",
    "WorkspaceProjectSet",
]
