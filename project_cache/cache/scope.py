"""Scope tracking - per-key, reference-counted caching enablement.

Caching for a key is enabled while at least one ``CacheScope`` for it is
undisposed. Scopes nest: two ``enable`` calls need two disposals before
the key is disabled again. The enabled -> disabled transition fires the
``on_disabled`` callback, which the cache service uses to release the
fallback store's artifacts for that key.

Disposing a scope more than once is a no-op.
"""

import logging
import threading
from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager
from types import TracebackType


logger = logging.getLogger(__name__)


class CacheScope:
    """Disposable handle returned by ``ScopeTracker.enable``.

    Example:
        >>> tracker = ScopeTracker()
        >>> with tracker.enable("proj-1"):
        ...     tracker.is_enabled("proj-1")
        True
        >>> tracker.is_enabled("proj-1")
        False
    """

    def __init__(self, tracker: "ScopeTracker", key: Hashable) -> None:
        self._tracker = tracker
        self._key = key
        self._disposed = False

    @property
    def key(self) -> Hashable:
        """Return the key this scope enables caching for."""
        return self._key

    @property
    def disposed(self) -> bool:
        """Whether ``dispose`` has already run."""
        return self._disposed

    def dispose(self) -> None:
        """Release this scope's hold on the key."""
        with self._tracker.locked():
            if self._disposed:
                logger.debug("Ignoring repeated dispose of scope for %r", self._key)
                return
            self._disposed = True
            self._tracker._release(self._key)

    def __enter__(self) -> "CacheScope":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"CacheScope(key={self._key!r}, {state})"


class ScopeTracker:
    """Reference-counted enabled/disabled state per key.

    Thread-safe: counts are mutated under a single reentrant lock, which
    callers may also hold (``locked``) to act on a consistent view of the
    enabled state.
    """

    def __init__(self, on_disabled: Callable[[Hashable], None] | None = None) -> None:
        """Initialize the tracker.

        Args:
            on_disabled: Called with the key on every enabled -> disabled
                transition, while the tracker lock is held
        """
        self._counts: dict[Hashable, int] = {}
        self._on_disabled = on_disabled
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the tracker lock so the enabled state cannot change."""
        with self._lock:
            yield

    def enable(self, key: Hashable) -> CacheScope:
        """Enable caching for ``key`` until the returned scope is disposed."""
        with self._lock:
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count
        logger.debug("Caching enabled for %r (active=%d)", key, count)
        return CacheScope(self, key)

    def is_enabled(self, key: Hashable) -> bool:
        """Return True while at least one scope for ``key`` is active."""
        with self._lock:
            return self._counts.get(key, 0) > 0

    def active_count(self, key: Hashable) -> int:
        """Return the number of undisposed scopes for ``key``."""
        with self._lock:
            return self._counts.get(key, 0)

    def active_keys(self) -> list[Hashable]:
        """Return the keys that currently have caching enabled."""
        with self._lock:
            return list(self._counts)

    def _release(self, key: Hashable) -> None:
        """Decrement ``key``'s count, disabling it at zero."""
        with self._lock:
            count = self._counts.get(key, 0)
            if count <= 0:
                # Only reachable through a scope minted by another tracker
                logger.warning("Release for %r with no active scope", key)
                return
            if count > 1:
                self._counts[key] = count - 1
                logger.debug("Caching scope released for %r (active=%d)", key, count - 1)
                return

            del self._counts[key]
            logger.debug("Caching disabled for %r", key)
            if self._on_disabled is not None:
                self._on_disabled(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)

    def __repr__(self) -> str:
        return f"ScopeTracker(active_keys={len(self)})"
