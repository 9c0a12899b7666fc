"""Fixtures for client state tests."""

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def gateway() -> AsyncMock:
    """A gateway double; configure return values per test."""
    return AsyncMock()
