"""
Django management command to normalize legacy product records.

Older records stored application areas as one comma-joined string and could
carry blank-padded dimension fields. This rewrites them into the current shape.

Usage:
    python manage.py backfill_product_fields
    python manage.py backfill_product_fields --dry-run
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.domain.exceptions import ProductValidationError
from catalog.domain.services.validator import normalize_application_areas
from catalog.models import Product


class Command(BaseCommand):
    help = "Normalize legacy application areas and dimension fields on existing products"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be changed without writing anything",
        )

    def _changes_for(self, product):
        changes = {}

        areas = product.application_areas
        if isinstance(areas, str) or (isinstance(areas, list) and any("," in str(a) for a in areas)):
            changes["application_areas"] = normalize_application_areas(areas)

        for name in ("size", "thickness"):
            value = getattr(product, name)
            if value is None or value != value.strip():
                changes[name] = (value or "").strip()

        return changes

    def handle(self, *args, **options):
        dry_run = options["dry_run"]

        self.stdout.write(self.style.SUCCESS("=== BACKFILLING PRODUCT FIELDS ==="))
        total = Product.objects.count()
        self.stdout.write(f"Found {total} products")

        updated = 0
        skipped = 0
        for product in Product.objects.order_by("id").iterator():
            try:
                changes = self._changes_for(product)
            except ProductValidationError as e:
                skipped += 1
                self.stdout.write(self.style.WARNING(f"  - {product.business_key}: skipped ({e.reason})"))
                continue

            if not changes:
                continue

            updated += 1
            if dry_run:
                self.stdout.write(f"  - {product.business_key}: would update {', '.join(sorted(changes))}")
                continue

            with transaction.atomic():
                Product.objects.filter(pk=product.pk).update(**changes)

        if dry_run:
            self.stdout.write(self.style.WARNING(f"DRY RUN: {updated} product(s) would be updated, {skipped} skipped"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Updated {updated} product(s), {skipped} skipped"))
