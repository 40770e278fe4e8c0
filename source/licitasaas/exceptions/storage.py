"""This module defines custom exceptions raised by the storage providers."""


class StorageError(Exception):
    """Base exception for storage backend failures."""

    pass


class StorageFileNotFoundError(StorageError):
    """Raised when a locator does not point to an existing stored file."""

    def __init__(self, locator: str) -> None:
        """Initializes the exception.

        Args:
            locator: The locator that could not be resolved.
        """
        super().__init__(f"File not found in storage: {locator}")
        self.locator = locator
