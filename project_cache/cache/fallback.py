"""Fallback key store for owners without a ``cached_object`` slot.

Artifacts are grouped by (key, owner identity) and held strongly until
the key's caching scope is disabled, at which point the whole key is
released in bulk. Every distinct artifact offered during the scope stays
alive: a producer may derive artifact B from artifact A while callers are
still using A, so neither is evicted individually.

Identity, not equality, is what counts. Re-offering the same instance is
a no-op, and unhashable artifacts are fine.

Owners that support weak references are only held weakly; if one is
collected while its scope is still enabled, its artifacts are released
with it. Owners that cannot be weakly referenced (e.g. a bare
``object()``) are pinned by their entry so their identity stays unique.
"""

import logging
import threading
import weakref
from collections.abc import Hashable
from typing import Any


logger = logging.getLogger(__name__)


class _OwnerEntry:
    """Artifacts retained for one owner under one key."""

    __slots__ = ("artifacts", "finalizer", "pinned_owner")

    def __init__(self) -> None:
        # id(artifact) -> artifact; the value pins the id
        self.artifacts: dict[int, Any] = {}
        self.finalizer: weakref.finalize | None = None
        self.pinned_owner: Any = None

    def detach(self) -> None:
        if self.finalizer is not None:
            self.finalizer.detach()
            self.finalizer = None
        self.pinned_owner = None


class FallbackKeyStore:
    """Strong, per-scope retention of artifacts for opaque owners.

    Thread-safe. The lock is reentrant because dropping an artifact or
    owner can run finalizers that call back into the store.

    Example:
        >>> store = FallbackKeyStore()
        >>> owner, artifact = object(), ["compiled"]
        >>> store.add("proj-1", owner, artifact)
        True
        >>> store.add("proj-1", owner, artifact)
        False
        >>> store.release("proj-1")
        1
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, dict[int, _OwnerEntry]] = {}
        self._lock = threading.RLock()

    def add(self, key: Hashable, owner: Any, artifact: Any) -> bool:
        """Retain ``artifact`` for ``owner`` under ``key``.

        Args:
            key: Caching key (an enabled scope is the caller's concern)
            owner: The opaque owning object
            artifact: The artifact to retain

        Returns:
            True if the artifact was newly retained, False if this owner
            already held the same instance under ``key``
        """
        with self._lock:
            owners = self._entries.setdefault(key, {})
            owner_id = id(owner)
            entry = owners.get(owner_id)
            if entry is None:
                entry = self._new_entry(key, owner)
                owners[owner_id] = entry

            artifact_id = id(artifact)
            if artifact_id in entry.artifacts:
                return False
            entry.artifacts[artifact_id] = artifact
            logger.debug(
                "Fallback store retained %s for %r (owner artifacts=%d)",
                type(artifact).__name__,
                key,
                len(entry.artifacts),
            )
            return True

    def _new_entry(self, key: Hashable, owner: Any) -> _OwnerEntry:
        entry = _OwnerEntry()
        try:
            entry.finalizer = weakref.finalize(owner, self._forget_owner, key, id(owner))
        except TypeError:
            entry.pinned_owner = owner
        return entry

    def _forget_owner(self, key: Hashable, owner_id: int) -> None:
        """Drop a collected owner's artifacts."""
        with self._lock:
            owners = self._entries.get(key)
            if owners is None:
                return
            entry = owners.pop(owner_id, None)
            if not owners:
                del self._entries[key]
        if entry is not None:
            logger.debug(
                "Owner under %r collected, released %d artifact(s)",
                key,
                len(entry.artifacts),
            )

    def release(self, key: Hashable) -> int:
        """Drop every artifact retained under ``key``.

        Returns:
            Number of artifacts released
        """
        with self._lock:
            owners = self._entries.pop(key, None)
            if not owners:
                return 0
            released = 0
            for entry in owners.values():
                entry.detach()
                released += len(entry.artifacts)
        logger.debug("Fallback store released %d artifact(s) for %r", released, key)
        return released

    def contains(self, key: Hashable, artifact: Any) -> bool:
        """Return True if any owner under ``key`` retains this instance."""
        artifact_id = id(artifact)
        with self._lock:
            owners = self._entries.get(key, {})
            return any(artifact_id in entry.artifacts for entry in owners.values())

    def count(self, key: Hashable | None = None) -> int:
        """Return the number of retained artifacts, for one key or all."""
        with self._lock:
            if key is not None:
                groups = [self._entries.get(key, {})]
            else:
                groups = list(self._entries.values())
            return sum(len(entry.artifacts) for owners in groups for entry in owners.values())

    def keys(self) -> list[Hashable]:
        """Return keys with at least one retained artifact."""
        with self._lock:
            return list(self._entries)

    def __repr__(self) -> str:
        return f"FallbackKeyStore(keys={len(self.keys())}, artifacts={self.count()})"
