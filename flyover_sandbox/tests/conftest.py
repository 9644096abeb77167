"""Pytest configuration for flyover sandbox tests."""
from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import numpy as np
import pytest

# //1.- Ensure repository root is available on the Python path for package imports.
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from flyover_sandbox.src.generation import load_world_settings  # noqa: E402


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1337)


@pytest.fixture
def world_settings():
    return load_world_settings()


# //2.- Coarser terrain and fewer props keep world construction quick in tests.
@pytest.fixture
def small_settings(world_settings):
    terrain = replace(world_settings.terrain, resolution=20)
    scatter = {
        kind: replace(entry, count=min(entry.count, 10)) for kind, entry in world_settings.scatter.items()
    }
    return replace(world_settings, terrain=terrain, scatter=scatter)
