"""Unit tests for project_cache/cache/fallback module.

Tests identity-based retention, bulk release and the owner collection
cascade of the FallbackKeyStore.
"""

import gc

from project_cache.cache.fallback import FallbackKeyStore
from tests.fakes.object_reference import Compilation, ObjectReference, OpaqueOwner


class TestFallbackKeyStoreAdd:
    """Tests for FallbackKeyStore.add."""

    def test_add_new_artifact(self) -> None:
        store = FallbackKeyStore()
        owner, artifact = OpaqueOwner(), Compilation("a")

        assert store.add("proj", owner, artifact) is True
        assert store.contains("proj", artifact) is True
        assert store.count("proj") == 1

    def test_readding_same_instance_is_noop(self) -> None:
        store = FallbackKeyStore()
        owner, artifact = OpaqueOwner(), Compilation("a")

        store.add("proj", owner, artifact)
        assert store.add("proj", owner, artifact) is False
        assert store.count("proj") == 1

    def test_identity_not_equality(self) -> None:
        """Equal but distinct artifacts are retained separately."""
        store = FallbackKeyStore()
        owner = OpaqueOwner()

        store.add("proj", owner, ["same"])
        store.add("proj", owner, ["same"])

        assert store.count("proj") == 2

    def test_unhashable_artifacts_accepted(self) -> None:
        store = FallbackKeyStore()

        assert store.add("proj", OpaqueOwner(), {"symbols": []}) is True

    def test_distinct_owners_tracked_separately(self) -> None:
        store = FallbackKeyStore()
        artifact = Compilation("shared")
        first, second = OpaqueOwner(), OpaqueOwner()

        assert store.add("proj", first, artifact) is True
        assert store.add("proj", second, artifact) is True
        assert store.count("proj") == 2

    def test_count_across_keys(self) -> None:
        store = FallbackKeyStore()
        owner = OpaqueOwner()

        store.add("a", owner, Compilation("1"))
        store.add("b", owner, Compilation("2"))
        store.add("b", owner, Compilation("3"))

        assert store.count() == 3
        assert sorted(store.keys()) == ["a", "b"]


class TestFallbackKeyStoreRelease:
    """Tests for FallbackKeyStore.release."""

    def test_release_returns_count(self) -> None:
        store = FallbackKeyStore()
        owner = OpaqueOwner()
        store.add("proj", owner, Compilation("1"))
        store.add("proj", owner, Compilation("2"))

        assert store.release("proj") == 2
        assert store.count("proj") == 0
        assert store.keys() == []

    def test_release_unknown_key(self) -> None:
        assert FallbackKeyStore().release("missing") == 0

    def test_release_leaves_other_keys(self) -> None:
        store = FallbackKeyStore()
        owner = OpaqueOwner()
        store.add("a", owner, Compilation("1"))
        store.add("b", owner, Compilation("2"))

        store.release("a")

        assert store.count("b") == 1

    def test_released_artifacts_become_collectible(self) -> None:
        store = FallbackKeyStore()
        owner = OpaqueOwner()
        reference = ObjectReference.create_from_factory(Compilation)
        reference.use_reference(lambda c: store.add("proj", owner, c))

        store.release("proj")

        reference.assert_released()


class TestFallbackKeyStoreRetention:
    """Tests for strong retention while entries exist."""

    def test_artifacts_held_until_release(self) -> None:
        store = FallbackKeyStore()
        owner = OpaqueOwner()
        reference = ObjectReference.create_from_factory(Compilation)
        reference.use_reference(lambda c: store.add("proj", owner, c))

        reference.assert_held()

    def test_unweakrefable_owner_is_pinned(self) -> None:
        """A bare object() owner keeps its entry until release."""
        store = FallbackKeyStore()
        reference = ObjectReference.create_from_factory(Compilation)
        reference.use_reference(lambda c: store.add("proj", object(), c))

        reference.assert_held()
        assert store.count("proj") == 1

        store.release("proj")
        reference.assert_released()

    def test_collected_owner_releases_its_artifacts(self) -> None:
        store = FallbackKeyStore()
        owner = OpaqueOwner()
        reference = ObjectReference.create_from_factory(Compilation)
        reference.use_reference(lambda c: store.add("proj", owner, c))

        del owner
        gc.collect()

        assert store.count("proj") == 0
        reference.assert_released()

    def test_release_detaches_owner_finalizers(self) -> None:
        """An owner dying after release must not disturb a new entry."""
        store = FallbackKeyStore()
        old_owner = OpaqueOwner()
        store.add("proj", old_owner, Compilation("old"))
        store.release("proj")

        new_owner = OpaqueOwner()
        store.add("proj", new_owner, Compilation("new"))
        del old_owner
        gc.collect()

        assert store.count("proj") == 1
