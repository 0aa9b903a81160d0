"""Host live-project-set providers.

The implicit cache asks the host whether a key belongs to a project the
host is already tracking. Any object with an ``is_key_live`` method will
do; ``WorkspaceProjectSet`` is a small in-memory workspace model for
hosts without one of their own.
"""

import threading
from collections.abc import Hashable, Iterable
from typing import Protocol, runtime_checkable


@runtime_checkable
class LiveProjectSetProvider(Protocol):
    """Protocol for the host's live-project-set query.

    Implementations must be fast, non-blocking and free of side effects;
    the implicit cache may call them while holding its lock.
    """

    def is_key_live(self, key: Hashable) -> bool:
        """Return True if ``key`` identifies a project the host tracks."""
        ...


class WorkspaceProjectSet:
    """Thread-safe in-memory set of live project keys.

    Example:
        >>> workspace = WorkspaceProjectSet()
        >>> workspace.add_project("core")
        >>> workspace.is_key_live("core")
        True
        >>> workspace.remove_project("core")
        True
        >>> workspace.is_key_live("core")
        False
    """

    def __init__(self, projects: Iterable[Hashable] = ()) -> None:
        self._projects: set[Hashable] = set()
        self._lock = threading.Lock()
        for project in projects:
            self.add_project(project)

    def add_project(self, key: Hashable) -> None:
        """Add a project to the live set."""
        with self._lock:
            self._projects.add(key)

    def remove_project(self, key: Hashable) -> bool:
        """Remove a project from the live set.

        Returns:
            True if the project was present
        """
        with self._lock:
            if key not in self._projects:
                return False
            self._projects.discard(key)
            return True

    def is_key_live(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._projects

    @property
    def projects(self) -> list[Hashable]:
        """Return the live project keys."""
        with self._lock:
            return list(self._projects)

    def __len__(self) -> int:
        with self._lock:
            return len(self._projects)

    def __repr__(self) -> str:
        return f"WorkspaceProjectSet(projects={len(self)})"
