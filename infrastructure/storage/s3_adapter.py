"""
S3 Storage Adapter
==================

Concrete implementation of StorageInterface using AWS S3 via django-storages.
"""

import logging
from typing import BinaryIO, List
from urllib.parse import unquote, urlparse

from django.conf import settings
from storages.backends.s3boto3 import S3Boto3Storage

from .interface import StorageException, StorageFile, StorageInterface

logger = logging.getLogger(__name__)


class S3StorageAdapter(StorageInterface):
    """
    AWS S3 storage implementation using django-storages.

    Configuration (in settings.py):
        AWS_ACCESS_KEY_ID: AWS access key
        AWS_SECRET_ACCESS_KEY: AWS secret key
        AWS_STORAGE_BUCKET_NAME: S3 bucket name
        AWS_S3_REGION_NAME: AWS region
        AWS_S3_CUSTOM_DOMAIN: Custom CDN domain (optional)
        AWS_QUERYSTRING_AUTH: Must be False so stored URLs stay resolvable
    """

    def __init__(self):
        """Initialize S3 storage backend."""
        self.storage = S3Boto3Storage()
        self._bucket_name = getattr(settings, "AWS_STORAGE_BUCKET_NAME", "default-bucket")

    def upload(self, file: BinaryIO, path: str, content_type: str) -> StorageFile:
        """
        Upload a file to S3.

        Raises:
            StorageException: If upload fails
        """
        try:
            if hasattr(file, "seek"):
                file.seek(0)
            if hasattr(file, "content_type"):
                file.content_type = content_type

            saved_path = self.storage.save(path, file)
            url = self.storage.url(saved_path)
            size = getattr(file, "size", None)
            if size is None:
                size = self.storage.size(saved_path)

            logger.info(f"Successfully uploaded file to S3: {saved_path}")

            return StorageFile(
                key=saved_path,
                url=url,
                size=size,
                content_type=content_type,
                bucket=self._bucket_name,
            )

        except Exception as e:
            logger.error(f"Failed to upload file to S3: {path}. Error: {str(e)}")
            raise StorageException(f"S3 upload failed: {str(e)}") from e

    def delete(self, key: str) -> bool:
        """
        Delete an object from S3.

        Raises:
            StorageException: If deletion fails
        """
        try:
            if self.exists(key):
                self.storage.delete(key)
                logger.info(f"Successfully deleted file from S3: {key}")
                return True
            else:
                logger.warning(f"File not found in S3, cannot delete: {key}")
                return False

        except Exception as e:
            logger.error(f"Failed to delete file from S3: {key}. Error: {str(e)}")
            raise StorageException(f"S3 deletion failed: {str(e)}") from e

    def key_from_url(self, url: str) -> str:
        """
        Resolve the S3 key from a public object URL.

        Handles virtual-hosted (bucket.s3.region.amazonaws.com/key), path-style
        (s3.region.amazonaws.com/bucket/key) and custom-domain URLs.
        """
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            raise StorageException(f"Not an absolute object URL: {url}")

        path = unquote(parsed.path).lstrip("/")
        host = parsed.netloc.lower()
        bucket = self._bucket_name.lower()
        custom_domain = (getattr(settings, "AWS_S3_CUSTOM_DOMAIN", None) or "").lower()

        if custom_domain and host == custom_domain:
            key = path
        elif host.startswith(f"{bucket}."):
            key = path
        elif path.startswith(f"{self._bucket_name}/"):
            key = path[len(self._bucket_name) + 1 :]
        else:
            raise StorageException(f"URL does not belong to bucket '{self._bucket_name}': {url}")

        location = getattr(self.storage, "location", "") or ""
        if location and key.startswith(f"{location}/"):
            key = key[len(location) + 1 :]

        if not key:
            raise StorageException(f"URL has no object key: {url}")
        return key

    def exists(self, key: str) -> bool:
        try:
            return self.storage.exists(key)
        except Exception as e:
            logger.error(f"Error checking existence of S3 key: {key}. Error: {str(e)}")
            return False

    def list_keys(self, prefix: str) -> List[str]:
        try:
            _, files = self.storage.listdir(prefix)
        except Exception as e:
            logger.error(f"Failed to list S3 prefix: {prefix}. Error: {str(e)}")
            raise StorageException(f"S3 listing failed: {str(e)}") from e

        prefix = prefix.rstrip("/")
        return [f"{prefix}/{name}" if prefix else name for name in files]

    @property
    def bucket_name(self) -> str:
        return self._bucket_name
