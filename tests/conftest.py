"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dgpt.config import Config, ConfigModel  # noqa: E402
from dgpt.storage import Storage  # noqa: E402
from dgpt.task_list import TaskList  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.dgpt."""
    monkeypatch.setenv("DGPT_HOME", str(tmp_path / "home"))
    Config._instance = None
    yield tmp_path / "home"
    Config._instance = None


@pytest.fixture
def config(tmp_path):
    return ConfigModel(data_dir=str(tmp_path / "data"))


@pytest.fixture
def storage(config):
    return Storage(config)


@pytest.fixture
def task_list():
    return TaskList()
