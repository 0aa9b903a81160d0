"""Cache Management Package.

Lifetime-aware retention of expensive artifacts:
- Scopes: per-key, reference-counted caching enablement
- Owner slots: owners implementing CachedObjectOwner keep their artifact
- Fallback key store: per-scope retention for opaque owners
- Implicit cache: bounded FIFO retention for ownerless artifacts, gated
  by the host's live project set
"""

from project_cache.cache.fallback import FallbackKeyStore
from project_cache.cache.host import LiveProjectSetProvider, WorkspaceProjectSet
from project_cache.cache.implicit import ImplicitCache
from project_cache.cache.owner import CachedObjectOwner, Owner, OwnerKind
from project_cache.cache.scope import CacheScope, ScopeTracker
from project_cache.cache.service import CacheStats, ProjectCacheService
from project_cache.cache.slots import OwnerSlotRegistry


__all__ = [
    # Owners
    "CachedObjectOwner",
    "Owner",
    "OwnerKind",
    # Retention structures
    "CacheScope",
    "FallbackKeyStore",
    "ImplicitCache",
    "OwnerSlotRegistry",
    "ScopeTracker",
    # Host collaborators
    "LiveProjectSetProvider",
    "WorkspaceProjectSet",
    # Service
    "CacheStats",
    "ProjectCacheService",
]
