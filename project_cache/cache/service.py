"""ProjectCacheService - lifetime-aware retention of expensive artifacts.

The service keeps large, costly-to-rebuild artifacts (compilations and
the like) in memory only while something legitimately needs them. It
never becomes the sole reason an artifact outlives its owner.

Routing for ``cache_if_enabled_for_key(key, owner, artifact)``:

    owner kind   scope enabled          scope disabled
    ----------   --------------------   --------------------
    CAPABILITY   owner.cached_object    dropped
    OPAQUE       fallback key store     dropped
    NONE         implicit cache         implicit cache

The implicit cache only exists when the service is built with
``create_implicit_cache=True`` and it refuses keys the host reports as
live. Disabling a key's last scope releases its fallback store entries
and clears the owner slots that key last wrote; an owner collected
earlier takes its artifact with it.

The service only emits log records; hosts call
``project_cache.core.logging.configure_logging()`` once at startup to
route them (JSON in production, console output otherwise).

Example:
    >>> from project_cache.cache.host import WorkspaceProjectSet
    >>> class Tracker:
    ...     cached_object = None
    >>> service = ProjectCacheService(live_set=WorkspaceProjectSet(["app"]))
    >>> tracker = Tracker()
    >>> with service.enable_caching("app"):
    ...     service.cache_if_enabled_for_key("app", tracker, ["compiled"])
    ...     tracker.cached_object
    ['compiled']
    >>> tracker.cached_object is None
    True
"""

import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

from project_cache.cache.fallback import FallbackKeyStore
from project_cache.cache.host import LiveProjectSetProvider
from project_cache.cache.implicit import ImplicitCache
from project_cache.cache.owner import Owner, OwnerKind
from project_cache.cache.scope import CacheScope, ScopeTracker
from project_cache.cache.slots import OwnerSlotRegistry
from project_cache.core.config import Settings, get_settings
from project_cache.core.constants import IMPLICIT_CACHE_SIZE
from project_cache.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time counts describing what the service retains.

    Attributes:
        active_scopes: Keys with caching currently enabled
        fallback_entries: Artifacts held by the fallback key store
        owner_slots: Owner slots that will be cleared on disable
        implicit_entries: Artifacts held by the implicit cache
        implicit_capacity: Implicit cache capacity (0 when disabled)
    """

    active_scopes: int
    fallback_entries: int
    owner_slots: int
    implicit_entries: int
    implicit_capacity: int


class ProjectCacheService:
    """Scoped, owner-aware artifact cache with an implicit safety net.

    One instance per host session; build it explicitly and pass it to
    the components that produce artifacts. Independent instances share
    no state.
    """

    def __init__(
        self,
        live_set: LiveProjectSetProvider | None = None,
        *,
        create_implicit_cache: bool = True,
        implicit_cache_size: int = IMPLICIT_CACHE_SIZE,
        implicit_cache_idle_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache service.

        Args:
            live_set: Host live-project-set query guarding the implicit
                cache; None lets every ownerless offer through
            create_implicit_cache: Retain ownerless artifacts at all
            implicit_cache_size: Implicit cache capacity
            implicit_cache_idle_seconds: Clear the implicit cache after
                this long without offers (None = never)
            clock: Monotonic time source for idle expiry

        Raises:
            CacheConfigurationError: If the implicit cache settings are invalid
        """
        self._fallback = FallbackKeyStore()
        self._slots = OwnerSlotRegistry()
        self._scopes = ScopeTracker(on_disabled=self._on_scope_disabled)
        self._implicit: ImplicitCache | None = None
        if create_implicit_cache:
            self._implicit = ImplicitCache(
                capacity=implicit_cache_size,
                live_set=live_set,
                idle_seconds=implicit_cache_idle_seconds,
                clock=clock,
            )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        live_set: LiveProjectSetProvider | None = None,
    ) -> "ProjectCacheService":
        """Build a service from configuration.

        Args:
            settings: Settings to use (defaults to ``get_settings()``)
            live_set: Host live-project-set query

        Returns:
            A new, independent service
        """
        settings = settings or get_settings()
        return cls(
            live_set,
            create_implicit_cache=settings.implicit_cache_enabled,
            implicit_cache_size=settings.implicit_cache_size,
            implicit_cache_idle_seconds=settings.implicit_cache_idle_seconds,
        )

    @property
    def implicit_cache_enabled(self) -> bool:
        """Whether ownerless artifacts can be retained."""
        return self._implicit is not None

    def enable_caching(self, key: Hashable) -> CacheScope:
        """Enable owner-based caching for ``key``.

        Args:
            key: Project (or other unit) identifier

        Returns:
            Scope handle; dispose it (or leave its ``with`` block) to end
            this hold on the key
        """
        return self._scopes.enable(key)

    def is_caching_enabled(self, key: Hashable) -> bool:
        """Return True while any scope for ``key`` is active."""
        return self._scopes.is_enabled(key)

    def cache_if_enabled_for_key(self, key: Hashable, owner: Any, artifact: Any) -> None:
        """Offer ``artifact`` for retention on behalf of ``owner``.

        Never raises: caching is a side channel, and a failure here only
        means the artifact is not retained.

        Args:
            key: Key the artifact was produced for
            owner: An ``Owner``, a raw owning object, or None
            artifact: The artifact to retain
        """
        tagged = Owner.resolve(owner)

        if not tagged.is_present:
            if self._implicit is not None:
                self._implicit.offer(key, artifact)
            return

        # Route under the scope lock so a concurrent disable cannot release
        # the key between the check and the insertion.
        with self._scopes.locked():
            if not self._scopes.is_enabled(key):
                return
            if tagged.kind is OwnerKind.CAPABILITY:
                self._store_in_owner(key, tagged.target, artifact)
            else:
                self._fallback.add(key, tagged.target, artifact)

    def _store_in_owner(self, key: Hashable, target: Any, artifact: Any) -> None:
        try:
            self._slots.assign(key, target, artifact)
        except Exception as e:
            logger.warning(
                "Owner rejected cached artifact",
                cache_key=repr(key),
                owner_type=type(target).__name__,
                error=str(e),
            )

    def _on_scope_disabled(self, key: Hashable) -> None:
        released = self._fallback.release(key)
        cleared = self._slots.release(key)
        if released or cleared:
            logger.debug(
                "Released artifacts for disabled key",
                cache_key=repr(key),
                released=released,
                slots_cleared=cleared,
            )

    def clear_implicit_cache(self) -> int:
        """Release every artifact held by the implicit cache.

        Returns:
            Number of artifacts released
        """
        if self._implicit is None:
            return 0
        count = self._implicit.clear()
        logger.info("Implicit cache cleared", released=count)
        return count

    def expire_idle_implicit_cache(self) -> int:
        """Clear the implicit cache if it has been idle past its timeout.

        Returns:
            Number of artifacts released
        """
        if self._implicit is None:
            return 0
        return self._implicit.expire_idle()

    def stats(self) -> CacheStats:
        """Return current retention counts."""
        implicit = self._implicit
        return CacheStats(
            active_scopes=len(self._scopes),
            fallback_entries=self._fallback.count(),
            owner_slots=len(self._slots),
            implicit_entries=len(implicit) if implicit is not None else 0,
            implicit_capacity=implicit.capacity if implicit is not None else 0,
        )

    def __repr__(self) -> str:
        return f"ProjectCacheService({self.stats()})"
