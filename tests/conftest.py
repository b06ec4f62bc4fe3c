"""
Pytest configuration and shared fixtures for merkle_arena tests.

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

_trees = importlib.import_module("fixtures.tree_fixtures")

SAMPLE = _trees.SAMPLE
EXPECTED_ROOT = _trees.EXPECTED_ROOT
make_tree = _trees.make_tree
make_sample_tree = _trees.make_sample_tree

from merkle_arena.config.runtime import MerkleConfig, set_default_config


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Pin the process-wide config so MERKLE_ARENA_* env vars don't leak in."""
    for key in list(os.environ):
        if key.startswith("MERKLE_ARENA_"):
            monkeypatch.delenv(key, raising=False)
    config = MerkleConfig()
    set_default_config(config)
    yield config
    set_default_config(None)


@pytest.fixture
def sample_leaves():
    """The ten-leaf lorem ipsum sample."""
    return list(SAMPLE)


@pytest.fixture
def sample_tree():
    """A filled, finalized tree over the sample leaves."""
    return make_sample_tree()


@pytest.fixture
def expected_root():
    """Reference root of the sample tree."""
    return EXPECTED_ROOT


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
