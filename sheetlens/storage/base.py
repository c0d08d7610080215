"""Blob storage interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class BlobInfo:
    """Information about a stored blob."""

    path: str
    size_bytes: int
    content_type: Optional[str] = None


class BlobStore(ABC):
    """Abstract base class for blob storage backends."""

    @abstractmethod
    async def write(self, path: str, content: bytes, content_type: Optional[str] = None) -> BlobInfo:
        """
        Write bytes to storage.

        Args:
            path: Storage path (e.g., "<ownerId>/<fileId>_sales.xlsx")
            content: File content
            content_type: Optional MIME type

        Returns:
            BlobInfo with details about the stored blob

        Raises:
            BlobStorageException: If the backend rejects the write
        """
        ...

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """
        Read bytes from storage.

        Raises:
            FileNotFoundError: If the blob doesn't exist
        """
        ...

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if a blob exists."""
        ...

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """
        Delete a blob.

        Returns:
            True if deleted, False if didn't exist
        """
        ...

    async def close(self) -> None:
        """Release backend resources."""
        return None
