"""
Image Store
===========

Batch upload/delete of product images on top of a StorageInterface.

Uploads fan out over a thread pool and join on the whole batch. Keys are
timestamp based with a random component
(``<prefix>/<epoch-ms>-<hex>-<index>-<filename>``) so that concurrent requests
in the same millisecond get distinct keys. The returned URLs keep the order of
the input files.
"""

import logging
import os
import secrets
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Iterable, List, Optional, Sequence

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation
from django.utils.text import get_valid_filename

from .interface import StorageException, StorageInterface

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _catalog_setting(name: str, default):
    return getattr(settings, "CATALOG", {}).get(name, default)


class ImageStore:
    """
    Uploads product image files and releases them again.

    Failure policy:
        upload_all waits for every upload in the batch. If any upload failed, the
        uploads that did succeed are deleted (best-effort) and a StorageException
        naming the failed file is raised, so a failed batch leaves nothing behind.
        delete_all never raises; failures are logged and skipped.
    """

    def __init__(
        self,
        storage: StorageInterface,
        key_prefix: Optional[str] = None,
        max_workers: Optional[int] = None,
    ):
        self.storage = storage
        self.key_prefix = (key_prefix or _catalog_setting("IMAGE_KEY_PREFIX", "products")).strip("/")
        self.max_workers = max_workers or _catalog_setting("UPLOAD_WORKERS", 4)

    def build_key(self, filename: str, index: int, timestamp_ms: Optional[int] = None) -> str:
        timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
        try:
            safe_name = get_valid_filename(os.path.basename(filename or ""))
        except SuspiciousFileOperation:
            safe_name = f"image_{index}"
        return f"{self.key_prefix}/{timestamp_ms}-{secrets.token_hex(4)}-{index}-{safe_name}"

    def _upload_one(self, file, key: str) -> str:
        content_type = getattr(file, "content_type", None) or DEFAULT_CONTENT_TYPE
        stored = self.storage.upload(file=file, path=key, content_type=content_type)
        return stored.url

    def upload_all(self, files: Sequence) -> List[str]:
        """
        Upload every file in parallel and return their URLs in input order.

        Raises:
            StorageException: If any single upload fails
        """
        files = list(files)
        if not files:
            return []

        timestamp_ms = int(time.time() * 1000)
        keys = [self.build_key(getattr(f, "name", ""), idx, timestamp_ms) for idx, f in enumerate(files)]

        workers = max(1, min(self.max_workers, len(files)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="image_upload") as pool:
            futures = [pool.submit(self._upload_one, f, key) for f, key in zip(files, keys)]
            wait(futures)

        urls: List[Optional[str]] = []
        failure = None
        for f, future in zip(files, futures):
            error = future.exception()
            if error is None:
                urls.append(future.result())
                continue
            urls.append(None)
            if failure is None:
                failure = (getattr(f, "name", "<unnamed>"), error)

        if failure is not None:
            uploaded = [url for url in urls if url]
            if uploaded:
                logger.warning(f"Rolling back {len(uploaded)} uploaded image(s) after failed batch")
                self.delete_all(uploaded)
            filename, error = failure
            logger.error(f"Image upload failed for '{filename}': {error}")
            raise StorageException(f"Failed to upload image '{filename}': {error}") from error

        logger.info(f"Uploaded {len(urls)} image(s) to bucket {self.storage.bucket_name}")
        return urls

    def delete_all(self, urls: Iterable[str]) -> int:
        """
        Delete the objects behind the given URLs, best-effort.

        Returns:
            Number of objects actually deleted
        """
        deleted = 0
        for url in urls:
            try:
                key = self.storage.key_from_url(url)
                if self.storage.delete(key):
                    deleted += 1
            except StorageException as e:
                logger.warning(f"Could not delete image {url}: {e}")
            except Exception as e:
                logger.error(f"Unexpected error deleting image {url}: {e}", exc_info=True)
        return deleted
