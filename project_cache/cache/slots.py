"""Owner slot registry - writes and clears ``cached_object`` slots.

An owner implementing ``CachedObjectOwner`` keeps its latest artifact in
its own slot, so the artifact lives exactly as long as the owner does.
The registry remembers, weakly, which key last wrote each owner's slot.
When that key's caching is disabled, the slot is cleared so a long-lived
owner does not pin an artifact past its scope. An owner whose slot was
since rewritten under another key is left alone.

Owners that cannot be weakly referenced are still written to, but their
slots are not cleared on disable.
"""

import logging
import threading
import weakref
from collections.abc import Hashable
from typing import Any

from project_cache.cache.owner import CachedObjectOwner


logger = logging.getLogger(__name__)


class OwnerSlotRegistry:
    """Tracks which key last filled each owner's slot."""

    def __init__(self) -> None:
        # id(owner) -> (weak owner, key of the last write)
        self._owners: dict[int, tuple[weakref.ref, Hashable]] = {}
        self._lock = threading.RLock()

    def assign(self, key: Hashable, owner: CachedObjectOwner, artifact: Any) -> None:
        """Store ``artifact`` in ``owner``'s slot on behalf of ``key``.

        Overwrites (and so releases) whatever the slot held before.
        """
        owner.cached_object = artifact
        owner_id = id(owner)
        with self._lock:
            tracked = self._owners.get(owner_id)
            if tracked is not None and tracked[0]() is owner:
                self._owners[owner_id] = (tracked[0], key)
                return
            try:
                ref = weakref.ref(owner, self._make_forget(owner_id))
            except TypeError:
                logger.debug(
                    "%s does not support weak references; its slot outlives the scope",
                    type(owner).__name__,
                )
                return
            self._owners[owner_id] = (ref, key)

    def _make_forget(self, owner_id: int):
        def forget(ref: weakref.ref) -> None:
            with self._lock:
                tracked = self._owners.get(owner_id)
                if tracked is not None and tracked[0] is ref:
                    del self._owners[owner_id]
        return forget

    def release(self, key: Hashable) -> int:
        """Clear the slots last written under ``key``.

        Returns:
            Number of owner slots cleared
        """
        with self._lock:
            owners = []
            for owner_id, (ref, owner_key) in list(self._owners.items()):
                if owner_key != key:
                    continue
                del self._owners[owner_id]
                owner = ref()
                if owner is not None:
                    owners.append(owner)

        cleared = 0
        for owner in owners:
            try:
                owner.cached_object = None
            except Exception as e:
                logger.warning(
                    "Could not clear slot of %s: %s: %s",
                    type(owner).__name__,
                    type(e).__name__,
                    str(e),
                )
                continue
            cleared += 1
        return cleared

    def __len__(self) -> int:
        with self._lock:
            return len(self._owners)
