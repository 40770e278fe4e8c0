"""This module defines the Pydantic models for tenant documents."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NewDocument(BaseModel):
    """Represents a document record to be registered after an upload.

    Attributes:
        tenant_id: The tenant that owns the document.
        doc_type: The document category label.
        file_url: The storage locator of the uploaded file.
        file_name: The original name of the uploaded file.
        expiration_date: When the document stops being valid.
        status: The document status label.
    """

    tenant_id: str
    doc_type: str = "Edital/Anexo"
    file_url: str
    file_name: str
    expiration_date: datetime
    status: str = "Válido"


class Document(BaseModel):
    """Represents a document record read from the database."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    tenant_id: str = Field(alias="tenantId")
    file_url: str = Field(alias="fileUrl")
    file_name: str | None = Field(default=None, alias="fileName")
    file_content: bytes | None = Field(default=None, alias="fileContent")
