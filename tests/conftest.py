"""
pytest configuration

Goals:
- keep tests fast and deterministic
- make sure GH_* variables from the caller's shell never leak into configs
- force a non-interactive matplotlib backend for the plotting tests
"""

import os
import sys

import pytest

# Ensure project root on sys.path for 'pygreenhouse' and 'scripts' imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("GH_"):
            monkeypatch.delenv(name, raising=False)
    # Force non-interactive backend for matplotlib (avoid display requirements)
    monkeypatch.setenv("MPLBACKEND", "Agg")
    yield


@pytest.fixture
def ground_only_model():
    from pygreenhouse import LayersModel, LayersModelConfig

    model = LayersModel(LayersModelConfig(initial_active_layers=0))
    model.set_source_shining(True)
    return model
