"""
Storage Interface
=================

Abstract base class defining the contract for object storage operations used by
the product catalog. Product images are addressed externally by their public
URL, so the interface also owns the URL <-> key mapping.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, List, Optional


@dataclass
class StorageFile:
    """
    Represents a stored object with its metadata.

    Attributes:
        key: Object key inside the bucket
        url: Fully-qualified public URL of the object
        size: Object size in bytes
        content_type: MIME type of the object
        bucket: Storage bucket name (optional)
    """

    key: str
    url: str
    size: int
    content_type: str
    bucket: Optional[str] = None


class StorageInterface(ABC):
    """
    Abstract interface for object storage operations.

    Concrete implementations:
        - S3StorageAdapter: AWS S3 (or any S3-compatible endpoint)
    """

    @abstractmethod
    def upload(self, file: BinaryIO, path: str, content_type: str) -> StorageFile:
        """
        Upload a file to storage.

        Args:
            file: Binary file object to upload
            path: Destination key in storage
            content_type: MIME type of the file

        Returns:
            StorageFile object with metadata

        Raises:
            StorageException: If upload fails
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete an object from storage.

        Returns:
            True if the object was deleted, False if it did not exist

        Raises:
            StorageException: If deletion fails
        """

    @abstractmethod
    def key_from_url(self, url: str) -> str:
        """
        Resolve the object key a public URL points at.

        Raises:
            StorageException: If the URL does not belong to this bucket
        """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if an object exists in storage."""

    @abstractmethod
    def list_keys(self, prefix: str) -> List[str]:
        """
        List object keys stored under a prefix.

        Raises:
            StorageException: If listing fails
        """

    @property
    @abstractmethod
    def bucket_name(self) -> str:
        """Get the storage bucket name."""


class StorageException(Exception):
    """Base exception for storage operations."""

    pass
