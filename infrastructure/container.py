"""
Dependency Injection Container
================================

Simple service locator for infrastructure dependencies and the catalog
services built on them. Instances are created lazily and cached for the
lifetime of the process.

Usage:
    from infrastructure.container import container

    storage = container.storage()
    service = container.product_service()
"""

import logging
from typing import Optional

from .storage import ImageStore, StorageFactory, StorageInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    Singleton pattern.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._storage: Optional[StorageInterface] = None
            self._image_store: Optional[ImageStore] = None
            self._product_repository = None
            self._product_service = None

            self._initialized = True
            logger.info("Service container initialized")

    def storage(self) -> StorageInterface:
        """
        Get storage service instance (S3).

        Returns:
            StorageInterface implementation (cached)
        """
        if self._storage is None:
            self._storage = StorageFactory.create()
            logger.debug(f"Created storage service: {type(self._storage).__name__}")

        return self._storage

    def image_store(self) -> ImageStore:
        if self._image_store is None:
            self._image_store = StorageFactory.create_image_store(self.storage())
            logger.debug("Created ImageStore")
        return self._image_store

    def product_repository(self):
        """Get ProductRepository instance."""
        if self._product_repository is None:
            from catalog.domain.repositories import ProductRepository

            self._product_repository = ProductRepository()
            logger.debug("Created ProductRepository")
        return self._product_repository

    def product_service(self):
        """Get ProductService instance."""
        if self._product_service is None:
            from catalog.domain.services import ProductService

            # ProductService depends on the repository and the image store
            self._product_service = ProductService(
                repository=self.product_repository(), image_store=self.image_store()
            )
            logger.debug("Created ProductService")
        return self._product_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._storage = None
        self._image_store = None
        self._product_repository = None
        self._product_service = None
        logger.info("Service container reset")

    def configure_for_testing(self, storage: StorageInterface):
        """Configure container with a substitute storage backend (typically a mock)."""
        self.reset()
        self._storage = storage
        logger.info("Service container configured for testing")


# Global singleton instance
container = ServiceContainer()
