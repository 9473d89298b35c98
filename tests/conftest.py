"""
Pytest configuration and shared fixtures for Merkle sum tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import os
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

SAMPLE_RECORDS = _common.SAMPLE_RECORDS
toy_hash = _common.toy_hash
make_entries = _common.make_entries
make_tree = _common.make_tree
write_entries_csv = _common.write_entries_csv


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def sample_entries():
    """Provide the 16 sample entries."""
    return make_entries()


@pytest.fixture
def sample_tree():
    """Provide a MerkleSumTree over the sample entries (SHA-256 field hash)."""
    return make_tree()


@pytest.fixture
def hash_fn():
    """Provide the cheap order-sensitive test hash."""
    return toy_hash


@pytest.fixture
def entries_csv(tmp_path):
    """Provide a CSV file holding the sample records."""
    return write_entries_csv(tmp_path / "entries.csv", SAMPLE_RECORDS)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every SUMTREE_* variable from the environment."""
    for key in list(os.environ):
        if key.startswith("SUMTREE_"):
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
