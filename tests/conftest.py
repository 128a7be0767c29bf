"""Shared test fixtures for the nsdebug test suite."""

import os
from unittest.mock import patch

import pytest

from nsdebug import registry as _registry_mod
from nsdebug.adapters import MappingPersistence, MemorySink
from nsdebug.registry import Registry


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: launches subprocesses")


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------
class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start=1_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


# ---------------------------------------------------------------------------
# Registry fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def sink():
    """A MemorySink without colour support."""
    return MemorySink()


@pytest.fixture
def store():
    """Backing dict for MappingPersistence (survives registry rebuilds)."""
    return {}


@pytest.fixture
def make_registry(sink, store, clock):
    """Factory for isolated registries sharing sink, store, and clock."""
    def _make(**kwargs):
        kwargs.setdefault("persistence", MappingPersistence(store))
        kwargs.setdefault("sink", sink)
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("environ", {})
        return Registry(**kwargs)
    return _make


@pytest.fixture
def registry(make_registry):
    """An isolated Registry with everything disabled."""
    return make_registry()


@pytest.fixture
def reset_default_registry():
    """Save and restore the module-level default Registry."""
    old = _registry_mod._registry
    _registry_mod._registry = None
    yield
    _registry_mod._registry = old


# ---------------------------------------------------------------------------
# Config file fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def tmp_config_home(tmp_path):
    """Provide a temporary home directory for ~/.nsdebug/config.json."""
    home = tmp_path / "home"
    home.mkdir()
    with patch.dict(os.environ, {"HOME": str(home), "USERPROFILE": str(home)}):
        with patch("pathlib.Path.home", return_value=home):
            yield home


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run in an empty working directory with no .nsdebug.json above it."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.delenv("DEBUG", raising=False)
    return work
