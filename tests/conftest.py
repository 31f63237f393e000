"""
conftest.py - Shared pytest fixtures for suite_positions tests

- Every test runs with default settings, independent of the environment or a local .env file.
- `registry` provides an isolated CurrencyRegistry with a few sample currencies.
"""

import pytest

from suite_positions.config import PositionsSettings, reset_settings, set_settings
from tests.helpers.helper_registry import create_registry


@pytest.fixture(autouse=True)
def default_settings():
    set_settings(PositionsSettings())
    yield
    reset_settings()


@pytest.fixture
def registry():
    return create_registry()
