from io import StringIO
from unittest.mock import MagicMock

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from catalog.models import Product
from catalog.tests.factories import BUCKET_URL, ProductFactory, image_url
from infrastructure.container import container
from infrastructure.storage import StorageException, StorageInterface

OLD = "1600000000000"


@pytest.fixture
def storage():
    storage = MagicMock(spec=StorageInterface)
    storage.bucket_name = "test-bucket"
    storage.key_from_url.side_effect = lambda url: url[len(BUCKET_URL) + 1 :]
    storage.delete.return_value = True
    container.configure_for_testing(storage)
    yield storage
    container.reset()


@pytest.mark.unit
@pytest.mark.django_db
class TestSweepOrphanImages:
    def test_deletes_only_unreferenced_old_keys(self, storage):
        ProductFactory(images=[image_url(f"{OLD}-0-kept.jpg")])
        storage.list_keys.return_value = [
            f"products/{OLD}-0-kept.jpg",
            f"products/{OLD}-0-orphan.jpg",
            "products/9999999999999-0-in-flight.jpg",
        ]
        out = StringIO()

        call_command("sweep_orphan_images", stdout=out)

        storage.list_keys.assert_called_once_with("products")
        storage.delete.assert_called_once_with(f"products/{OLD}-0-orphan.jpg")
        assert "Deleted 1/1" in out.getvalue()

    def test_reads_age_from_randomized_keys(self, storage):
        storage.list_keys.return_value = [
            f"products/{OLD}-9f86d081-0-orphan.jpg",
            "products/9999999999999-3c2a1b0e-0-in-flight.jpg",
        ]

        call_command("sweep_orphan_images", stdout=StringIO())

        storage.delete.assert_called_once_with(f"products/{OLD}-9f86d081-0-orphan.jpg")

    def test_dry_run_deletes_nothing(self, storage):
        storage.list_keys.return_value = [f"products/{OLD}-0-orphan.jpg"]
        out = StringIO()

        call_command("sweep_orphan_images", "--dry-run", stdout=out)

        storage.delete.assert_not_called()
        assert f"products/{OLD}-0-orphan.jpg" in out.getvalue()

    def test_listing_failure_is_a_command_error(self, storage):
        storage.list_keys.side_effect = StorageException("S3 listing failed: AccessDenied")

        with pytest.raises(CommandError):
            call_command("sweep_orphan_images", stdout=StringIO())


@pytest.mark.unit
@pytest.mark.django_db
class TestBackfillProductFields:
    def test_splits_legacy_areas_and_trims_dimensions(self):
        legacy = ProductFactory(size=" 120x60 ")
        Product.objects.filter(pk=legacy.pk).update(application_areas="Flooring, Walls")
        current = ProductFactory()

        call_command("backfill_product_fields", stdout=StringIO())

        legacy.refresh_from_db()
        assert legacy.application_areas == ["Flooring", "Walls"]
        assert legacy.size == "120x60"
        current_areas = list(current.application_areas)
        current.refresh_from_db()
        assert current.application_areas == current_areas

    def test_dry_run_changes_nothing(self):
        legacy = ProductFactory()
        Product.objects.filter(pk=legacy.pk).update(application_areas="Flooring,Walls")
        out = StringIO()

        call_command("backfill_product_fields", "--dry-run", stdout=out)

        legacy.refresh_from_db()
        assert legacy.application_areas == "Flooring,Walls"
        assert "would update application_areas" in out.getvalue()

    def test_unknown_legacy_area_is_skipped(self):
        legacy = ProductFactory()
        Product.objects.filter(pk=legacy.pk).update(application_areas="Flooring,Roof")
        out = StringIO()

        call_command("backfill_product_fields", stdout=out)

        legacy.refresh_from_db()
        assert legacy.application_areas == "Flooring,Roof"
        assert "1 skipped" in out.getvalue()
