"""Test configuration and shared fixtures.

Pattern: Pytest fixtures, conftest.py
"""

import pytest

from project_cache.cache.host import WorkspaceProjectSet
from project_cache.core.config import Settings, get_settings


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with safe defaults."""
    return Settings(
        environment="test",
        log_level="DEBUG",
        implicit_cache_enabled=True,
        implicit_cache_size=4,
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Keep get_settings() from leaking environment between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Host Fixtures
# ============================================================================

@pytest.fixture
def workspace() -> WorkspaceProjectSet:
    """Create a workspace with two live projects."""
    return WorkspaceProjectSet(["proj1", "proj2"])
