"""This module defines the repository for tenant document records."""

import uuid

from licitasaas.models.documents import Document, NewDocument
from licitasaas.providers.logging import Logger, LoggingProvider
from sqlalchemy import Engine, text


class DocumentsRepository:
    """Manages data operations for the `Document` table.

    Lookups by URL fragment use `strpos` rather than `LIKE`, so `%` and `_`
    inside file names are matched literally.
    """

    logger: Logger
    engine: Engine

    def __init__(self, engine: Engine) -> None:
        """Initializes the repository with its dependencies.

        Args:
            engine: The SQLAlchemy Engine for database connections.
        """
        self.logger = LoggingProvider().get_logger()
        self.engine = engine

    def find_document_by_url_fragment(self, fragment: str, tenant_id: str) -> Document | None:
        """Finds a tenant document whose stored URL contains the fragment.

        Args:
            fragment: A file name or any other piece of the stored URL.
            tenant_id: The tenant the document must belong to.

        Returns:
            The first matching `Document` without its binary content, or None.
        """
        sql = text(
            """
            SELECT id, "tenantId", "fileUrl", "fileName"
            FROM "Document"
            WHERE strpos("fileUrl", :fragment) > 0
              AND "tenantId" = :tenant_id
            LIMIT 1;
            """
        )
        with self.engine.connect() as conn:
            row = conn.execute(sql, {"fragment": fragment, "tenant_id": tenant_id}).mappings().first()

        if not row:
            return None
        return Document.model_validate(dict(row))

    def find_document_content(self, file_name: str, tenant_id: str) -> bytes | None:
        """Retrieves the binary copy of an upload kept in the database.

        Used when the storage backend has lost a file, e.g. after a redeploy
        on ephemeral disk.

        Args:
            file_name: The flat file name.
            tenant_id: The tenant the document must belong to.

        Returns:
            The stored bytes, or None when no copy exists.
        """
        sql = text(
            """
            SELECT "fileContent"
            FROM "Document"
            WHERE (strpos("fileUrl", :file_name) > 0 OR "fileName" = :file_name)
              AND "tenantId" = :tenant_id
              AND "fileContent" IS NOT NULL
            LIMIT 1;
            """
        )
        with self.engine.connect() as conn:
            content = conn.execute(sql, {"file_name": file_name, "tenant_id": tenant_id}).scalar_one_or_none()

        return bytes(content) if content is not None else None

    def save_document(self, document: NewDocument) -> str:
        """Registers a new document and returns its ID.

        Args:
            document: The document to insert.

        Returns:
            The identifier of the new row.
        """
        sql = text(
            """
            INSERT INTO "Document" (
                id, "tenantId", "docType", "fileUrl", "fileName", "expirationDate", status
            ) VALUES (
                :id, :tenant_id, :doc_type, :file_url, :file_name, :expiration_date, :status
            )
            RETURNING id;
            """
        )
        params = {
            "id": str(uuid.uuid4()),
            "tenant_id": document.tenant_id,
            "doc_type": document.doc_type,
            "file_url": document.file_url,
            "file_name": document.file_name,
            "expiration_date": document.expiration_date,
            "status": document.status,
        }
        with self.engine.connect() as conn:
            document_id: str = conn.execute(sql, parameters=params).scalar_one()
            conn.commit()

        self.logger.info(f"Registered document {document_id} for tenant {document.tenant_id}.")
        return document_id
