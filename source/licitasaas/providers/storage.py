"""This module provides the storage backends for uploaded files.

All backends share one capability set: `store`, `fetch` and `delete`. Files
live in a single flat namespace; tenant isolation is not enforced by the
storage layout, only by the file authorizer. The analysis pipeline depends on
`fetch` alone.
"""

import uuid
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import cast
from urllib.parse import unquote, urlparse

from google.api_core.exceptions import NotFound
from google.auth.credentials import AnonymousCredentials
from google.cloud.storage import Client
from licitasaas.exceptions.storage import StorageFileNotFoundError
from licitasaas.models.files import PDF_MIME_TYPE, StoredFile
from licitasaas.providers.config import Config, ConfigProvider
from licitasaas.providers.logging import Logger, LoggingProvider

LOCAL_URL_PREFIX = "/uploads/"


def file_name_from_locator(locator: str) -> str:
    """Extracts the flat file name from a URL, a path or a bare name.

    Args:
        locator: A storage URL (`/uploads/x.pdf`, `https://host/b/x.pdf?t=1`)
            or a bare file name.

    Returns:
        The last path segment, URI-decoded and without query suffix.
    """
    path = urlparse(locator).path or locator
    return PurePosixPath(unquote(path.split("?")[0])).name


def build_file_name(name_hint: str, tenant_id: str | None) -> str:
    """Generates a unique storage name that keeps the tenant prefix convention.

    Args:
        name_hint: The original file name, used only for its extension.
        tenant_id: The owning tenant, if known.

    Returns:
        A name shaped like `<tenant_id>_<uuid><ext>`.
    """
    prefix = f"{tenant_id}_" if tenant_id else ""
    return f"{prefix}{uuid.uuid4()}{PurePosixPath(name_hint).suffix}"


class StorageProvider(ABC):
    """The capability set every storage backend implements."""

    @abstractmethod
    def store(self, content: bytes, name_hint: str, tenant_id: str | None = None) -> StoredFile:
        """Persists new content under a unique name.

        Args:
            content: The file bytes.
            name_hint: The original file name.
            tenant_id: The owning tenant, used as the name prefix.

        Returns:
            The locator and the stored file name.
        """

    @abstractmethod
    def fetch(self, locator: str) -> bytes:
        """Reads a stored file.

        Args:
            locator: A URL or file name previously returned by `store`.

        Returns:
            The file content.

        Raises:
            StorageFileNotFoundError: If nothing is stored under the locator.
        """

    @abstractmethod
    def delete(self, locator: str) -> None:
        """Removes a stored file. Missing files are ignored.

        Args:
            locator: A URL or file name previously returned by `store`.
        """


class LocalStorageProvider(StorageProvider):
    """Stores files as flat entries of the configured upload directory."""

    logger: Logger
    upload_dir: Path

    def __init__(self, upload_dir: Path) -> None:
        """Initializes the provider and creates the upload directory.

        Args:
            upload_dir: The directory holding every uploaded file.
        """
        self.logger = LoggingProvider().get_logger()
        self.upload_dir = upload_dir
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, locator: str) -> Path:
        """Maps a locator to `<upload_dir>/<file_name>`.

        Args:
            locator: A URL or file name.

        Returns:
            The path of the file inside the upload directory.
        """
        return self.upload_dir / file_name_from_locator(locator)

    def store(self, content: bytes, name_hint: str, tenant_id: str | None = None) -> StoredFile:
        file_name = build_file_name(name_hint, tenant_id)
        (self.upload_dir / file_name).write_bytes(content)
        self.logger.info(f"Stored {len(content)} bytes as '{file_name}'.")
        return StoredFile(url=f"{LOCAL_URL_PREFIX}{file_name}", file_name=file_name)

    def fetch(self, locator: str) -> bytes:
        path = self.path_for(locator)
        if not path.is_file():
            raise StorageFileNotFoundError(locator)
        return path.read_bytes()

    def delete(self, locator: str) -> None:
        path = self.path_for(locator)
        if path.is_file():
            path.unlink()
            self.logger.info(f"Deleted stored file '{path.name}'.")


class GcsStorageProvider(StorageProvider):
    """Stores files as flat blobs of a Google Cloud Storage bucket."""

    _client: Client | None = None

    def __init__(self, bucket_name: str, host: str | None = None) -> None:
        """Initializes the provider.

        Args:
            bucket_name: The bucket holding every uploaded file.
            host: An optional emulator endpoint, used with anonymous credentials.
        """
        self.logger = LoggingProvider().get_logger()
        self.bucket_name = bucket_name
        self.host = host

    def get_client(self) -> Client:
        """Returns a GCS client, creating one if it doesn't exist.

        Returns:
            A GCS client.
        """
        if not self._client:
            if self.host:
                self._client = Client(
                    credentials=AnonymousCredentials(),
                    project="test",
                    client_options={"api_endpoint": self.host},
                )
            else:
                self._client = Client()
        return self._client

    def store(self, content: bytes, name_hint: str, tenant_id: str | None = None) -> StoredFile:
        file_name = build_file_name(name_hint, tenant_id)
        blob = self.get_client().bucket(self.bucket_name).blob(file_name)
        blob.upload_from_string(content, content_type=PDF_MIME_TYPE)
        self.logger.info(f"Uploaded {len(content)} bytes to gs://{self.bucket_name}/{file_name}.")
        return StoredFile(url=f"https://storage.googleapis.com/{self.bucket_name}/{file_name}", file_name=file_name)

    def fetch(self, locator: str) -> bytes:
        blob = self.get_client().bucket(self.bucket_name).blob(file_name_from_locator(locator))
        try:
            return cast(bytes, blob.download_as_bytes())
        except NotFound as e:
            raise StorageFileNotFoundError(locator) from e

    def delete(self, locator: str) -> None:
        blob = self.get_client().bucket(self.bucket_name).blob(file_name_from_locator(locator))
        try:
            blob.delete()
        except NotFound:
            self.logger.info(f"Blob for '{locator}' was already absent.")


class StorageProviderFactory:
    """Builds the storage backend selected by `STORAGE_TYPE`."""

    @staticmethod
    def create(config: Config | None = None) -> StorageProvider:
        """Instantiates the configured storage backend.

        Args:
            config: The configuration to use. A fresh one is loaded when omitted.

        Returns:
            A `LocalStorageProvider` or a `GcsStorageProvider`.

        Raises:
            ValueError: If `STORAGE_TYPE` names an unknown backend.
        """
        config = config or ConfigProvider.get_config()
        storage_type = config.STORAGE_TYPE.upper()
        if storage_type == "LOCAL":
            return LocalStorageProvider(config.UPLOAD_DIR)
        if storage_type == "GCS":
            return GcsStorageProvider(config.GCP_GCS_BUCKET_UPLOADS, config.GCP_GCS_HOST)
        raise ValueError(f"Unknown STORAGE_TYPE: {config.STORAGE_TYPE}")
