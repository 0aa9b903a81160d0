"""Owner capability and the tagged owner value passed to the cache.

An owner is the object on whose behalf an artifact is cached. Its shape
decides how the artifact is retained:

- CAPABILITY: the owner exposes a single ``cached_object`` slot. The cache
  writes the artifact into that slot and the owner's own lifetime keeps
  the artifact alive.
- OPAQUE: any other object. The artifact goes to the fallback key store
  for the life of the caching scope.
- NONE: no owner. The artifact is offered to the implicit cache.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CachedObjectOwner(Protocol):
    """Protocol for owners that retain their latest cached artifact.

    Implementations only need a read/write ``cached_object`` attribute.
    Each new offer overwrites the slot, releasing the previous artifact.

    Example:
        >>> class CompilationTracker:
        ...     cached_object = None
        >>> isinstance(CompilationTracker(), CachedObjectOwner)
        True
    """

    cached_object: Any


class OwnerKind(str, Enum):
    """How an owner retains the artifacts offered on its behalf."""
    CAPABILITY = "capability"
    OPAQUE = "opaque"
    NONE = "none"


@dataclass(frozen=True)
class Owner:
    """Owner tagged with its retention kind.

    Callers that know their owner's shape build one explicitly; anything
    else is classified by ``Owner.resolve``. Instances are short-lived
    call arguments and are never stored by the cache.

    Attributes:
        kind: Retention mechanism for this owner
        target: The owning object (None for OwnerKind.NONE)
    """

    kind: OwnerKind
    target: Any = None

    def __post_init__(self) -> None:
        """Validate that the target agrees with the kind."""
        if self.kind is OwnerKind.NONE and self.target is not None:
            raise ValueError("An owner of kind NONE cannot carry a target")
        if self.kind is not OwnerKind.NONE and self.target is None:
            raise ValueError(f"An owner of kind {self.kind.name} requires a target")

    @classmethod
    def capability(cls, target: CachedObjectOwner) -> "Owner":
        """Tag an object that exposes a ``cached_object`` slot."""
        return cls(OwnerKind.CAPABILITY, target)

    @classmethod
    def opaque(cls, target: Any) -> "Owner":
        """Tag an arbitrary object, retained through the fallback store."""
        return cls(OwnerKind.OPAQUE, target)

    @classmethod
    def none(cls) -> "Owner":
        """Tag the absence of an owner."""
        return _NO_OWNER

    @classmethod
    def resolve(cls, target: Any) -> "Owner":
        """Classify a raw owner object.

        Args:
            target: An ``Owner``, an owning object, or None

        Returns:
            ``target`` itself when it is already an ``Owner``, otherwise
            the owner tagged by its shape
        """
        if isinstance(target, Owner):
            return target
        if target is None:
            return _NO_OWNER
        # An unfilled __slots__ entry is declared on the type but not readable
        if hasattr(type(target), "cached_object") or isinstance(target, CachedObjectOwner):
            return cls.capability(target)
        return cls.opaque(target)

    @property
    def is_present(self) -> bool:
        """Whether an owning object was supplied."""
        return self.kind is not OwnerKind.NONE

    def __repr__(self) -> str:
        if self.target is None:
            return f"Owner({self.kind.name})"
        return f"Owner({self.kind.name}, {type(self.target).__name__})"


_NO_OWNER = Owner(OwnerKind.NONE)
