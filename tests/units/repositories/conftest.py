"""Shared fixtures for the repository tests."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def mock_engine() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_connection(mock_engine: MagicMock) -> MagicMock:
    connection: MagicMock = mock_engine.connect.return_value.__enter__.return_value
    return connection
