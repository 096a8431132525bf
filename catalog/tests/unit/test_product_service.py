from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from catalog.domain.exceptions import PersistenceError
from catalog.domain.repositories import ProductRepository
from catalog.domain.services import ErrorCodes, ProductService
from catalog.models import Product
from catalog.tests.factories import ProductFactory, image_file, image_url
from infrastructure.storage import ImageStore, StorageException


def create_payload(**overrides):
    payload = {
        "name": "Statuario",
        "price": "120.00",
        "category": "Imported Marble",
        "applicationAreas": "Flooring,Walls",
        "quantityAvailable": "40",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def image_store():
    store = MagicMock(spec=ImageStore)
    store.upload_all.side_effect = lambda files: [image_url(f"9-{i}-{f.name}") for i, f in enumerate(files)]
    store.delete_all.side_effect = lambda urls: len(list(urls))
    return store


@pytest.fixture
def repository():
    return ProductRepository()


@pytest.fixture
def product_service(repository, image_store):
    return ProductService(repository=repository, image_store=image_store)


@pytest.mark.unit
@pytest.mark.django_db
class TestCreateProduct:
    def test_create_success(self, product_service, image_store):
        files = [image_file("a.jpg"), image_file("b.png", content_type="image/png")]

        result = product_service.create_product(create_payload(), files)

        assert result.ok is True
        product = result.value
        assert product.images == [image_url("9-0-a.jpg"), image_url("9-1-b.png")]
        assert product.application_areas == ["Flooring", "Walls"]
        assert product.status == "draft"
        assert Product.objects.filter(business_key=product.business_key).exists()
        image_store.upload_all.assert_called_once_with(files)

    @pytest.mark.parametrize("count", [1, 10])
    def test_image_count_matches_uploads(self, product_service, count):
        result = product_service.create_product(create_payload(), [image_file(f"{i}.jpg") for i in range(count)])

        assert result.ok is True
        assert len(result.value.images) == count

    def test_zero_files_touches_nothing(self, image_store):
        repository = MagicMock(spec=ProductRepository)
        service = ProductService(repository=repository, image_store=image_store)

        result = service.create_product(create_payload(), [])

        assert result.ok is False
        assert result.error == ErrorCodes.VALIDATION_ERROR
        assert result.field == "images"
        image_store.upload_all.assert_not_called()
        repository.insert.assert_not_called()

    def test_invalid_field_is_rejected_before_upload(self, product_service, image_store):
        result = product_service.create_product(create_payload(price="-5"), [image_file()])

        assert result.ok is False
        assert result.field == "price"
        image_store.upload_all.assert_not_called()
        assert Product.objects.count() == 0

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"name": "x" * 256}, "name"),
            ({"size": "s" * 256}, "size"),
            ({"thickness": "t" * 256}, "thickness"),
            ({"numberOfPieces": "3000000000"}, "numberOfPieces"),
        ],
    )
    def test_value_too_large_for_column_uploads_nothing(self, product_service, image_store, overrides, field):
        result = product_service.create_product(create_payload(**overrides), [image_file()])

        assert result.ok is False
        assert result.error == ErrorCodes.VALIDATION_ERROR
        assert result.field == field
        image_store.upload_all.assert_not_called()
        image_store.delete_all.assert_not_called()
        assert Product.objects.count() == 0

    def test_upload_failure_persists_nothing(self, product_service, image_store):
        image_store.upload_all.side_effect = StorageException("Failed to upload image 'a.jpg': timeout")

        result = product_service.create_product(create_payload(), [image_file("a.jpg")])

        assert result.ok is False
        assert result.error == ErrorCodes.STORAGE_ERROR
        assert "a.jpg" in result.error_detail
        assert Product.objects.count() == 0

    def test_persistence_failure_releases_uploads(self, image_store):
        repository = MagicMock(spec=ProductRepository)
        repository.insert.side_effect = PersistenceError("Could not insert product: duplicate key")
        service = ProductService(repository=repository, image_store=image_store)

        result = service.create_product(create_payload(), [image_file("a.jpg")])

        assert result.ok is False
        assert result.error == ErrorCodes.PERSISTENCE_ERROR
        image_store.delete_all.assert_called_once_with([image_url("9-0-a.jpg")])


@pytest.mark.unit
@pytest.mark.django_db
class TestReadProducts:
    def test_get_product(self, product_service):
        product = ProductFactory()

        result = product_service.get_product(product.business_key)

        assert result.ok is True
        assert result.value == product

    def test_get_missing_product(self, product_service):
        result = product_service.get_product("nope")

        assert result.ok is False
        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND

    def test_list_products_with_status_filter(self, product_service):
        ProductFactory(status="draft")
        approved = ProductFactory(status="approved")

        assert len(product_service.list_products().value) == 2
        assert product_service.list_products(status="approved").value == [approved]

    def test_list_products_invalid_status(self, product_service):
        result = product_service.list_products(status="archived")

        assert result.ok is False
        assert result.field == "status"


@pytest.mark.unit
@pytest.mark.django_db
class TestUpdateProduct:
    def test_keep_one_and_add_one(self, product_service, image_store):
        url1, url2 = image_url("1-0-a.jpg"), image_url("1-1-b.jpg")
        product = ProductFactory(images=[url1, url2])

        result = product_service.update_product(
            product.business_key, {}, keep_images=f'["{url1}"]', files=[image_file("new.jpg")]
        )

        assert result.ok is True
        assert result.value.images == [url1, image_url("9-0-new.jpg")]
        image_store.delete_all.assert_called_once_with([url2])

    def test_omitted_fields_unchanged_and_empty_clears(self, product_service, image_store):
        product = ProductFactory(name="Onyx Honey", size="120x60", thickness="18mm", number_of_pieces=4)

        result = product_service.update_product(product.business_key, {"size": "", "numberOfPieces": ""})

        assert result.ok is True
        product.refresh_from_db()
        assert product.name == "Onyx Honey"
        assert product.thickness == "18mm"
        assert product.size == ""
        assert product.number_of_pieces is None
        image_store.upload_all.assert_called_once_with([])
        image_store.delete_all.assert_not_called()

    def test_scalar_update(self, product_service):
        product = ProductFactory()

        result = product_service.update_product(product.business_key, {"price": "99.99", "category": "Onyx"})

        assert result.ok is True
        product.refresh_from_db()
        assert product.price == Decimal("99.99")
        assert product.category == "Onyx"

    def test_missing_product(self, product_service, image_store):
        result = product_service.update_product("nope", {"name": "x"}, files=[image_file()])

        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND
        image_store.upload_all.assert_not_called()

    def test_invalid_field_uploads_nothing(self, product_service, image_store):
        product = ProductFactory()

        result = product_service.update_product(product.business_key, {"category": "Marble"}, files=[image_file()])

        assert result.field == "category"
        image_store.upload_all.assert_not_called()

    def test_oversized_name_uploads_nothing(self, product_service, image_store):
        product = ProductFactory(name="Onyx Honey")

        result = product_service.update_product(product.business_key, {"name": "x" * 256}, files=[image_file()])

        assert result.error == ErrorCodes.VALIDATION_ERROR
        assert result.field == "name"
        image_store.upload_all.assert_not_called()
        product.refresh_from_db()
        assert product.name == "Onyx Honey"

    def test_removing_every_image_is_rejected(self, product_service, image_store):
        product = ProductFactory(images=[image_url("a.jpg")])

        result = product_service.update_product(product.business_key, {}, keep_images="[]")

        assert result.ok is False
        assert result.field == "images"
        product.refresh_from_db()
        assert product.images == [image_url("a.jpg")]
        image_store.delete_all.assert_not_called()

    def test_foreign_keep_url_is_rejected(self, product_service):
        product = ProductFactory(images=[image_url("a.jpg")])

        result = product_service.update_product(
            product.business_key, {}, keep_images=[image_url("someone-else.jpg")]
        )

        assert result.field == "keepImages"

    def test_upload_failure_leaves_product_unchanged(self, product_service, image_store):
        product = ProductFactory(name="Before", images=[image_url("a.jpg")])
        image_store.upload_all.side_effect = StorageException("Failed to upload image 'x.jpg': boom")

        result = product_service.update_product(product.business_key, {"name": "After"}, files=[image_file("x.jpg")])

        assert result.error == ErrorCodes.STORAGE_ERROR
        product.refresh_from_db()
        assert product.name == "Before"
        assert product.images == [image_url("a.jpg")]

    def test_persistence_failure_releases_new_uploads(self, image_store):
        existing = ProductFactory.build(images=[image_url("a.jpg")])
        repository = MagicMock(spec=ProductRepository)
        repository.find_by_key.return_value = existing
        repository.update_by_key.side_effect = PersistenceError("Could not update product")
        service = ProductService(repository=repository, image_store=image_store)

        result = service.update_product(existing.business_key, {}, files=[image_file("n.jpg")])

        assert result.error == ErrorCodes.PERSISTENCE_ERROR
        image_store.delete_all.assert_called_once_with([image_url("9-0-n.jpg")])


@pytest.mark.unit
@pytest.mark.django_db
class TestSetStatus:
    def test_set_status(self, product_service):
        product = ProductFactory(status="approved")

        result = product_service.set_status(product.business_key, "draft")

        assert result.ok is True
        assert result.value.status == "draft"

    def test_invalid_status(self, product_service):
        product = ProductFactory(status="pending")

        result = product_service.set_status(product.business_key, "published")

        assert result.error == ErrorCodes.VALIDATION_ERROR
        product.refresh_from_db()
        assert product.status == "pending"

    def test_missing_product(self, product_service):
        assert product_service.set_status("nope", "approved").error == ErrorCodes.PRODUCT_NOT_FOUND


@pytest.mark.unit
@pytest.mark.django_db
class TestDeleteProduct:
    def test_delete_releases_every_image(self, product_service, image_store):
        urls = [image_url(f"{i}.jpg") for i in range(3)]
        product = ProductFactory(images=urls)

        result = product_service.delete_product(product.business_key)

        assert result.ok is True
        image_store.delete_all.assert_called_once_with(urls)
        assert not Product.objects.filter(business_key=product.business_key).exists()

    def test_image_delete_failures_do_not_block_removal(self, product_service, image_store):
        product = ProductFactory(images=[image_url("a.jpg"), image_url("b.jpg")])
        image_store.delete_all.side_effect = lambda urls: 0

        result = product_service.delete_product(product.business_key)

        assert result.ok is True
        assert not Product.objects.filter(business_key=product.business_key).exists()

    def test_missing_product(self, product_service, image_store):
        result = product_service.delete_product("nope")

        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND
        image_store.delete_all.assert_not_called()
