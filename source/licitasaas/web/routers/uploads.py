"""Route storing edital uploads and registering them as tenant documents."""

from datetime import datetime, timedelta
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from google.api_core.exceptions import GoogleAPIError
from licitasaas.exceptions.storage import StorageError
from licitasaas.models.documents import NewDocument
from licitasaas.providers.logging import LoggingProvider
from licitasaas.providers.storage import StorageProvider
from licitasaas.repositories.documents import DocumentsRepository
from licitasaas.web.dependencies import get_documents_repo, get_storage, get_tenant_id
from licitasaas.web.routers.analysis import error_response

router = APIRouter(prefix="/api/upload")

DOCUMENT_VALIDITY = timedelta(days=365)
UPLOAD_FAILED_MESSAGE = "File upload failed"


@router.post("")
def upload_file(
    file: UploadFile = File(...),
    tenant_id: str = Depends(get_tenant_id),
    storage: StorageProvider = Depends(get_storage),
    documents_repo: DocumentsRepository = Depends(get_documents_repo),
) -> Any:
    """Stores an uploaded file under the tenant prefix and registers it.

    Registering the file as a document is what lets the document proof
    authorize it later. A file whose registration fails is removed from the
    storage backend again, so no unregistered upload is left behind.

    Args:
        file: The uploaded file.
        tenant_id: The requesting tenant.
        storage: The storage backend.
        documents_repo: The documents repository.

    Returns:
        The stored locator, the storage name and the new document ID, or a
        JSON error body with status 500.
    """
    logger = LoggingProvider().get_logger()
    original_name = file.filename or "upload.pdf"
    content = file.file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Nenhum arquivo enviado.")

    try:
        stored = storage.store(content, original_name, tenant_id)
    except (StorageError, OSError, GoogleAPIError) as e:
        logger.error(f"Could not store upload '{original_name}': {e}")
        return error_response(500, UPLOAD_FAILED_MESSAGE)

    try:
        document_id = documents_repo.save_document(
            NewDocument(
                tenant_id=tenant_id,
                file_url=stored.url,
                file_name=original_name,
                expiration_date=datetime.now() + DOCUMENT_VALIDITY,
            )
        )
    except Exception as e:
        logger.error(f"Could not register upload '{original_name}', removing '{stored.file_name}': {e}")
        try:
            storage.delete(stored.url)
        except (StorageError, OSError, GoogleAPIError) as cleanup_error:
            logger.error(f"Could not remove orphaned upload '{stored.file_name}': {cleanup_error}")
        return error_response(500, UPLOAD_FAILED_MESSAGE)

    logger.info(f"Upload '{original_name}' stored as '{stored.file_name}'.")

    return {
        "message": "File uploaded successfully",
        "fileUrl": stored.url,
        "fileName": original_name,
        "storageName": stored.file_name,
        "originalName": original_name,
        "documentId": document_id,
    }
