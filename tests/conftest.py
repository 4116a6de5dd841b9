from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Import the local src tree, not an installed copy of catreg.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))


@pytest.fixture
def clean_registry():
    """Yield the default policy registry and drop anything a test registers."""
    from catreg.core.factory import registry

    before = set(registry.names())
    yield registry
    for name in set(registry.names()) - before:
        registry.unregister(name)
