"""Implicit cache - bounded FIFO retention for ownerless artifacts.

Artifacts offered without an owner are kept alive in a fixed-capacity
ring, independent of any caching scope; once the ring is full the oldest
artifact is dropped, whatever its key. Offers whose key is part of the
host's live project set are rejected: the host already tracks those
artifacts, and retaining them here as well would distort its eviction.

The same instance offered twice occupies two slots.
"""

import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Hashable
from typing import Any

from project_cache.cache.host import LiveProjectSetProvider
from project_cache.core.constants import IMPLICIT_CACHE_SIZE
from project_cache.core.exceptions import CacheConfigurationError


logger = logging.getLogger(__name__)


class ImplicitCache:
    """Fixed-capacity, strictly FIFO, ownerless artifact retention.

    Optionally clears itself once no offer has arrived for
    ``idle_seconds``, so a burst of work keeps its artifacts warm but an
    idle host does not pin them indefinitely. The idle check runs on each
    offer and on ``expire_idle``; there is no background timer.
    """

    def __init__(
        self,
        capacity: int = IMPLICIT_CACHE_SIZE,
        live_set: LiveProjectSetProvider | None = None,
        idle_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the implicit cache.

        Args:
            capacity: Maximum number of retained artifacts (>= 1)
            live_set: Host live-project-set query; None accepts every key
            idle_seconds: Clear after this long without offers (None = never)
            clock: Monotonic time source in seconds

        Raises:
            CacheConfigurationError: If capacity or idle_seconds is invalid
        """
        if capacity < 1:
            raise CacheConfigurationError(
                f"Implicit cache capacity must be at least 1, got {capacity}",
                setting="implicit_cache_size",
                value=capacity,
            )
        if idle_seconds is not None and idle_seconds <= 0:
            raise CacheConfigurationError(
                f"Implicit cache idle timeout must be positive, got {idle_seconds}",
                setting="implicit_cache_idle_seconds",
                value=idle_seconds,
            )
        self._capacity = capacity
        self._live_set = live_set
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._ring: deque[Any] = deque(maxlen=capacity)
        self._last_offer: float | None = None
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        """Return the maximum number of retained artifacts."""
        return self._capacity

    def offer(self, key: Hashable, artifact: Any) -> bool:
        """Retain ``artifact`` unless ``key`` is in the live project set.

        Args:
            key: Key the artifact was produced for
            artifact: Ownerless artifact to retain

        Returns:
            True if the artifact was inserted
        """
        if self._is_live(key):
            logger.debug("Implicit cache rejected %r: key is in the live project set", key)
            return False

        with self._lock:
            now = self._clock()
            self._expire_locked(now)
            evicting = len(self._ring) == self._capacity
            # deque(maxlen) drops the oldest entry on overflow
            self._ring.append(artifact)
            self._last_offer = now

        if evicting:
            logger.debug("Implicit cache full (capacity=%d), evicted oldest entry", self._capacity)
        return True

    def _is_live(self, key: Hashable) -> bool:
        """Query the live project set, treating failures as live."""
        if self._live_set is None:
            return False
        try:
            return bool(self._live_set.is_key_live(key))
        except Exception as e:
            # Log text only; the exception's traceback holds the caller's frames
            logger.warning(
                "Live project set query failed for %r, rejecting offer: %s: %s",
                key,
                type(e).__name__,
                str(e),
            )
            return True

    def _expire_locked(self, now: float) -> int:
        if self._idle_seconds is None or self._last_offer is None:
            return 0
        idle_for = now - self._last_offer
        if idle_for < self._idle_seconds:
            return 0
        count = len(self._ring)
        self._ring.clear()
        self._last_offer = None
        if count:
            logger.debug("Implicit cache idle for %.1fs, cleared %d entries", idle_for, count)
        return count

    def expire_idle(self) -> int:
        """Clear the cache if it has been idle past its timeout.

        Returns:
            Number of artifacts released
        """
        with self._lock:
            return self._expire_locked(self._clock())

    def clear(self) -> int:
        """Release every retained artifact.

        Returns:
            Number of artifacts released
        """
        with self._lock:
            count = len(self._ring)
            self._ring.clear()
            self._last_offer = None
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._ring)

    def __repr__(self) -> str:
        return f"ImplicitCache(size={len(self)}, capacity={self._capacity})"
