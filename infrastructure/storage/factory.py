"""
Storage Factory
===============

Factory for creating S3 storage and the image store built on it.
"""

import logging
from typing import Optional

from .image_store import ImageStore
from .interface import StorageInterface
from .s3_adapter import S3StorageAdapter

logger = logging.getLogger(__name__)


class StorageFactory:
    """
    Factory for the S3 storage backend.

    Usage:
        storage = StorageFactory.create()
        images = StorageFactory.create_image_store(storage)
    """

    @staticmethod
    def create() -> StorageInterface:
        """
        Create an S3 storage backend instance.

        Returns:
            S3StorageAdapter instance configured from settings
        """
        logger.info("Creating S3 storage backend")
        return S3StorageAdapter()

    @staticmethod
    def create_image_store(storage: Optional[StorageInterface] = None) -> ImageStore:
        """Create an ImageStore over the given (or a new S3) storage backend."""
        return ImageStore(storage or StorageFactory.create())
