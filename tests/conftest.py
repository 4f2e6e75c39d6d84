"""Shared test configuration."""

import pytest

from roiboard.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached per process; reset so env tweaks don't leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
