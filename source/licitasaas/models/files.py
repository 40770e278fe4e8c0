"""This module defines the Pydantic models for uploaded files."""

from google.genai import types
from pydantic import BaseModel, ConfigDict

PDF_MIME_TYPE = "application/pdf"


class StoredFile(BaseModel):
    """Represents a file written to a storage backend.

    Attributes:
        url: The public locator of the file, e.g. `/uploads/<file_name>`.
        file_name: The flat, unique name the file was stored under.
    """

    url: str
    file_name: str


class AuthorizedFile(BaseModel):
    """A file proven to belong to a tenant, loaded into memory.

    Instances live for the duration of a single AI call and are never
    persisted.

    Attributes:
        file_name: The normalized file reference that was authorized.
        content: The binary content read from storage.
        mime_type: The media type sent along with the inline data.
    """

    model_config = ConfigDict(frozen=True)

    file_name: str
    content: bytes
    mime_type: str = PDF_MIME_TYPE

    def to_part(self) -> types.Part:
        """Converts the file into an inline-data part for the Gemini API.

        Returns:
            A `types.Part` carrying the file bytes.
        """
        return types.Part.from_bytes(data=self.content, mime_type=self.mime_type)
