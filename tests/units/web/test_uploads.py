"""Unit tests for the upload route."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from licitasaas.exceptions.storage import StorageError
from licitasaas.models.files import StoredFile
from sqlalchemy.exc import OperationalError


def test_upload_stores_and_registers_file(
    client: TestClient,
    auth_headers: dict[str, str],
    mock_storage: MagicMock,
    mock_documents_repo: MagicMock,
) -> None:
    """Tests that an upload is stored under the tenant and registered."""
    mock_storage.store.return_value = StoredFile(url="/uploads/tenant-1_abc.pdf", file_name="tenant-1_abc.pdf")
    mock_documents_repo.save_document.return_value = "doc-1"

    response = client.post(
        "/api/upload",
        files={"file": ("edital.pdf", b"%PDF-1.7", "application/pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["fileUrl"] == "/uploads/tenant-1_abc.pdf"
    assert body["storageName"] == "tenant-1_abc.pdf"
    assert body["originalName"] == "edital.pdf"
    assert body["documentId"] == "doc-1"
    mock_storage.store.assert_called_once_with(b"%PDF-1.7", "edital.pdf", "tenant-1")
    document = mock_documents_repo.save_document.call_args.args[0]
    assert document.tenant_id == "tenant-1"
    assert document.file_url == "/uploads/tenant-1_abc.pdf"


def test_upload_rejects_empty_file(
    client: TestClient, auth_headers: dict[str, str], mock_storage: MagicMock
) -> None:
    """Tests that an empty upload is a bad request."""
    response = client.post(
        "/api/upload",
        files={"file": ("edital.pdf", b"", "application/pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 400
    mock_storage.store.assert_not_called()


def test_upload_removes_file_when_registration_fails(
    client: TestClient,
    auth_headers: dict[str, str],
    mock_storage: MagicMock,
    mock_documents_repo: MagicMock,
) -> None:
    """Tests that a failed document insert deletes the stored file and answers JSON."""
    mock_storage.store.return_value = StoredFile(url="/uploads/tenant-1_abc.pdf", file_name="tenant-1_abc.pdf")
    mock_documents_repo.save_document.side_effect = OperationalError("INSERT", {}, Exception("db down"))

    response = client.post(
        "/api/upload",
        files={"file": ("edital.pdf", b"%PDF-1.7", "application/pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"error": "File upload failed"}
    mock_storage.delete.assert_called_once_with("/uploads/tenant-1_abc.pdf")


def test_upload_reports_unexpected_registration_error(
    client: TestClient,
    auth_headers: dict[str, str],
    mock_storage: MagicMock,
    mock_documents_repo: MagicMock,
) -> None:
    """Tests that any registration error still cleans up, even if the cleanup fails too."""
    mock_storage.store.return_value = StoredFile(url="/uploads/tenant-1_abc.pdf", file_name="tenant-1_abc.pdf")
    mock_documents_repo.save_document.side_effect = RuntimeError("db down")
    mock_storage.delete.side_effect = OSError("read-only file system")

    response = client.post(
        "/api/upload",
        files={"file": ("edital.pdf", b"%PDF-1.7", "application/pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"error": "File upload failed"}
    mock_storage.delete.assert_called_once_with("/uploads/tenant-1_abc.pdf")


def test_upload_reports_storage_failure(
    client: TestClient,
    auth_headers: dict[str, str],
    mock_storage: MagicMock,
    mock_documents_repo: MagicMock,
) -> None:
    """Tests that a storage backend failure answers JSON and registers nothing."""
    mock_storage.store.side_effect = StorageError("bucket unavailable")

    response = client.post(
        "/api/upload",
        files={"file": ("edital.pdf", b"%PDF-1.7", "application/pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"error": "File upload failed"}
    mock_documents_repo.save_document.assert_not_called()
    mock_storage.delete.assert_not_called()
