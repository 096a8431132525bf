"""
Storage Abstraction Layer
==========================

Provides a unified interface for object storage operations (S3) and the
product image store built on top of it.
"""

from .factory import StorageFactory
from .image_store import ImageStore
from .interface import StorageException, StorageFile, StorageInterface
from .s3_adapter import S3StorageAdapter

__all__ = [
    "StorageInterface",
    "StorageFile",
    "StorageException",
    "S3StorageAdapter",
    "ImageStore",
    "StorageFactory",
]
