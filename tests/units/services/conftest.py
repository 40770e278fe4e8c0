"""Shared fixtures for the service tests."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def mock_documents_repo() -> MagicMock:
    """A documents repository that knows no documents and no stored copies."""
    repo = MagicMock()
    repo.find_document_by_url_fragment.return_value = None
    repo.find_document_content.return_value = None
    return repo
