"""Unit tests for project_cache/cache/host module.

Tests the WorkspaceProjectSet live-set model.
"""

from project_cache.cache.host import LiveProjectSetProvider, WorkspaceProjectSet
from tests.fakes.object_reference import StaticLiveSet


class TestWorkspaceProjectSet:
    """Tests for WorkspaceProjectSet."""

    def test_satisfies_provider_protocol(self) -> None:
        assert isinstance(WorkspaceProjectSet(), LiveProjectSetProvider)
        assert isinstance(StaticLiveSet(), LiveProjectSetProvider)

    def test_added_project_is_live(self) -> None:
        workspace = WorkspaceProjectSet()
        workspace.add_project("proj1")

        assert workspace.is_key_live("proj1") is True
        assert workspace.is_key_live("proj2") is False

    def test_initial_projects(self) -> None:
        workspace = WorkspaceProjectSet(["a", "b"])

        assert sorted(workspace.projects) == ["a", "b"]
        assert len(workspace) == 2

    def test_remove_project(self) -> None:
        workspace = WorkspaceProjectSet(["proj1"])

        assert workspace.remove_project("proj1") is True
        assert workspace.remove_project("proj1") is False
        assert workspace.is_key_live("proj1") is False
