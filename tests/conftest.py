"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

# Add project root to Python path so 'graft' is importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import tempfile
from typing import Generator
import pytest

from graft.config import RegistryConfig, reset_config
from graft.core.logging import reset_logging
from graft.extensions.instantiator import Instantiator
from graft.extensions.registry import ExtensionRegistry

_GRAFT_ENV = [
    "GRAFT_LOCK_READS",
    "GRAFT_MAX_LISTED_NAMES",
    "GRAFT_LOG_LEVEL",
    "GRAFT_LOG_FORMAT",
    "GRAFT_LOG_FILE",
    "GRAFT_LOG_CONSOLE",
    "GRAFT_LOG_DIR",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep GRAFT_* variables from the developer's shell out of tests."""
    for key in _GRAFT_ENV:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()
    reset_logging()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def instantiator() -> Instantiator:
    """A fresh instantiator with an empty class cache."""
    return Instantiator()


@pytest.fixture
def registry(instantiator: Instantiator) -> ExtensionRegistry:
    """An empty registry."""
    return ExtensionRegistry(config=RegistryConfig(), instantiator=instantiator)
