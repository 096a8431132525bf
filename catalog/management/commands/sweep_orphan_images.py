"""
Django management command to delete product images no product references.

Storage and the database commit independently, so a crash between an upload
and the database write (or between a delete and the image cleanup) can leave
objects behind. This lists every key under the image prefix and deletes the
ones that no product's ``images`` points at.

Usage:
    python manage.py sweep_orphan_images --dry-run
    python manage.py sweep_orphan_images --min-age 3600
"""

import time

from django.core.management.base import BaseCommand, CommandError

from infrastructure.container import container
from infrastructure.storage import StorageException


def _key_timestamp_ms(key: str):
    """Upload time encoded in ``<prefix>/<epoch-ms>-...`` keys, or None."""
    head = key.rsplit("/", 1)[-1].split("-", 1)[0]
    return int(head) if head.isdigit() else None


class Command(BaseCommand):
    help = "Delete stored product images that no product references"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List orphaned images without deleting them",
        )
        parser.add_argument(
            "--min-age",
            type=int,
            default=3600,
            help="Only sweep images uploaded at least this many seconds ago (default: 3600)",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        min_age_ms = options["min_age"] * 1000

        storage = container.storage()
        image_store = container.image_store()
        repository = container.product_repository()

        self.stdout.write(self.style.NOTICE(f"Scanning '{image_store.key_prefix}/' in bucket {storage.bucket_name}..."))

        try:
            stored_keys = storage.list_keys(image_store.key_prefix)
        except StorageException as e:
            raise CommandError(f"Could not list stored images: {e}") from e

        referenced = set()
        for url in repository.iter_image_urls():
            try:
                referenced.add(storage.key_from_url(url))
            except StorageException:
                self.stdout.write(self.style.WARNING(f"  Ignoring foreign image URL: {url}"))

        cutoff_ms = int(time.time() * 1000) - min_age_ms
        orphans = []
        for key in stored_keys:
            if key in referenced:
                continue
            uploaded_ms = _key_timestamp_ms(key)
            if uploaded_ms is not None and uploaded_ms > cutoff_ms:
                continue
            orphans.append(key)

        self.stdout.write(f"Found {len(stored_keys)} stored image(s), {len(orphans)} orphaned")

        if not orphans:
            self.stdout.write(self.style.SUCCESS("No orphaned images"))
            return

        if dry_run:
            for key in orphans:
                self.stdout.write(f"  - {key}")
            self.stdout.write(self.style.WARNING(f"DRY RUN: Would delete {len(orphans)} image(s)"))
            return

        deleted = 0
        for key in orphans:
            try:
                if storage.delete(key):
                    deleted += 1
            except StorageException as e:
                self.stdout.write(self.style.ERROR(f"  Failed to delete {key}: {e}"))

        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted}/{len(orphans)} orphaned image(s)"))
