"""Shared constants for the project cache."""

# Number of ownerless artifacts kept alive by the implicit cache when no
# other capacity is configured.
IMPLICIT_CACHE_SIZE: int = 3
