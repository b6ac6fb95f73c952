"""Shared fixtures."""

import pytest

from decor.config import DecorSettings, reset_settings
from decor.versions import VersionRegistry

from tests.models import Resource


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep DECOR_* environment and cached settings out of every test."""
    for name in list(DecorSettings.model_fields) + ["config"]:
        monkeypatch.delenv(f"DECOR_{name.upper()}", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def registry():
    return VersionRegistry()


@pytest.fixture
def resource():
    return Resource("foo", 2, 2)
