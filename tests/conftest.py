"""
Pytest configuration and shared fixtures for rewards engine tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_rows = _common.make_rows
make_distribution = _common.make_distribution
make_tree = _common.make_tree
make_tree_records = _common.make_tree_records


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def rows():
    """Provide five distinct reward rows."""
    return make_rows()


@pytest.fixture
def tree(rows):
    """Provide a tree built from the default rows."""
    return make_tree(rows)


@pytest.fixture
def distribution():
    """Provide a two-token distribution record as plain JSON data."""
    return make_distribution()


@pytest.fixture
def tree_records():
    """Provide serialized trees for the default distribution."""
    return make_tree_records()


@pytest.fixture
def isolated_env(monkeypatch):
    """Clear REWARDS_* variables so tests see default configuration."""
    for key in [
        "REWARDS_DISTRIBUTION_FILE",
        "REWARDS_TREES_FILE",
        "REWARDS_PARALLEL",
        "REWARDS_MAX_WORKERS",
        "REWARDS_LOG_LEVEL",
        "REWARDS_LOG_FILE",
        "REWARDS_OUTPUT_FORMAT",
    ]:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_corrupt():
    """Helper to assert a load failed with a specific check id."""
    from core.schemas.errors import CorruptTreeRecordException, ErrorCodes

    def _assert(record, check_id: str):
        from core.merkle.serializer import load

        with pytest.raises(CorruptTreeRecordException) as exc_info:
            load(record)
        assert exc_info.value.code == ErrorCodes.CORRUPT_TREE_RECORD
        assert exc_info.value.details.get("check_id") == check_id, (
            f"Expected check '{check_id}', got {exc_info.value.details}"
        )
        return exc_info.value
    return _assert
