"""
ProductService - product mutation pipeline

Create, read, partial update, status change and delete for stone product
listings. Validation always runs before any image is uploaded, so a request
that is going to be rejected never leaves objects in the bucket.

Object storage and the database are committed independently. The service
compensates where it can: images uploaded for a write that then fails are
deleted again, and images dropped from a product by an update or delete are
released after the database commit. A crash between those steps can still
leave orphans; ``manage.py sweep_orphan_images`` cleans them up.
"""

from typing import List, Mapping, Optional, Sequence

from catalog.domain.exceptions import PersistenceError, ProductNotFoundError, ProductValidationError
from catalog.domain.models import Product
from catalog.domain.repositories import ProductRepository
from catalog.domain.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from catalog.domain.services.reconciler import (
    merge_images,
    parse_keep_images,
    plan_images,
    reconcile_fields,
    removed_images,
)
from catalog.domain.services.status_workflow import StatusWorkflow
from catalog.domain.services.validator import (
    parse_status,
    validate_create,
    validate_image_files,
    validate_update,
)
from infrastructure.observability import add_span_attributes, get_tracer
from infrastructure.storage import ImageStore, StorageException

tracer = get_tracer(__name__)


class ProductService(BaseService):
    """
    Service for the product catalog.

    Responsibilities:
    - Validate create/update payloads and uploaded images
    - Upload new images and release dropped ones
    - Reconcile partial updates with the stored product
    - Drive status transitions

    All operations return ServiceResult; domain exceptions never escape.
    """

    def __init__(
        self,
        repository: Optional[ProductRepository] = None,
        image_store: Optional[ImageStore] = None,
        status_workflow: Optional[StatusWorkflow] = None,
    ):
        """
        Initialize ProductService.

        Args:
            repository: Product persistence (defaults to a new ProductRepository)
            image_store: Image uploads/deletes (injected via DI container)
            status_workflow: Status transitions (defaults to one over ``repository``)
        """
        super().__init__()
        if image_store is None:
            from infrastructure.container import container

            image_store = container.image_store()
        self.repository = repository or ProductRepository()
        self.image_store = image_store
        self.status_workflow = status_workflow or StatusWorkflow(self.repository)

    @staticmethod
    def _invalid(error: ProductValidationError) -> ServiceResult:
        return service_err(ErrorCodes.VALIDATION_ERROR, error.reason, field=error.field)

    @staticmethod
    def _not_found(error: ProductNotFoundError) -> ServiceResult:
        return service_err(ErrorCodes.PRODUCT_NOT_FOUND, error.message)

    def _rollback_uploads(self, urls: Sequence[str]) -> None:
        if urls:
            self.logger.warning(f"Releasing {len(urls)} uploaded image(s) after failed write")
            self.image_store.delete_all(urls)

    @BaseService.log_performance
    def create_product(self, fields: Mapping, files: Sequence) -> ServiceResult[Product]:
        """
        Create a product from a full payload and its image files.

        Args:
            fields: Wire payload (camelCase keys)
            files: Uploaded image files, at least one

        Returns:
            ServiceResult with the created Product

        Example:
            >>> result = product_service.create_product(
            ...     {
            ...         "name": "Statuario",
            ...         "price": "120.00",
            ...         "category": "Imported Marble",
            ...         "applicationAreas": "Flooring,Walls",
            ...         "quantityAvailable": "40",
            ...     },
            ...     files=[image_file],
            ... )
        """
        files = list(files or [])
        with tracer.start_as_current_span("catalog_create_product") as span:
            add_span_attributes(span, **{"images.count": len(files)})

            try:
                create_fields = validate_create(fields, files)
            except ProductValidationError as e:
                return self._invalid(e)

            try:
                urls = self.image_store.upload_all(files)
            except StorageException as e:
                span.record_exception(e)
                return service_err(ErrorCodes.STORAGE_ERROR, str(e))

            try:
                product = self.repository.insert({**create_fields.to_model_fields(), "images": urls})
            except PersistenceError as e:
                self._rollback_uploads(urls)
                return service_err(ErrorCodes.PERSISTENCE_ERROR, e.message, field=e.field)
            except Exception as e:
                self.logger.error(f"Error creating product: {e}", exc_info=True)
                span.record_exception(e)
                self._rollback_uploads(urls)
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

            add_span_attributes(span, business_key=product.business_key)
            self.logger.info(f"Created product: {product.name} (key={product.business_key}) with {len(urls)} image(s)")
            return service_ok(product)

    @BaseService.log_performance
    def get_product(self, business_key: str) -> ServiceResult[Product]:
        try:
            return service_ok(self.repository.find_by_key(business_key))
        except ProductNotFoundError as e:
            return self._not_found(e)

    @BaseService.log_performance
    def list_products(self, status: Optional[str] = None) -> ServiceResult[List[Product]]:
        """
        List products newest first.

        Args:
            status: Optional exact status filter (draft, pending, approved)
        """
        if status:
            try:
                status = parse_status(status)
            except ProductValidationError as e:
                return self._invalid(e)

        products = self.repository.find_all(status=status)
        self.logger.info(f"Listed products: count={len(products)}, status={status or 'any'}")
        return service_ok(products)

    @BaseService.log_performance
    def update_product(
        self,
        business_key: str,
        fields: Mapping,
        keep_images=None,
        files: Optional[Sequence] = None,
    ) -> ServiceResult[Product]:
        """
        Partially update a product.

        Args:
            business_key: Product to update
            fields: Wire payload with only the fields to change
            keep_images: Existing image URLs to keep (list or JSON string);
                None keeps every existing image
            files: New image files, appended after the kept images

        Example:
            >>> # product.images == [url1, url2]
            >>> result = product_service.update_product(key, {}, keep_images=[url1], files=[new_file])
            >>> result.value.images
            [url1, new_url]
        """
        files = list(files or [])
        with tracer.start_as_current_span("catalog_update_product") as span:
            add_span_attributes(span, business_key=business_key, **{"images.new": len(files)})

            try:
                update_fields = validate_update(fields)
                validate_image_files(files, required=False)
                keep = parse_keep_images(keep_images)
            except ProductValidationError as e:
                return self._invalid(e)

            try:
                existing = self.repository.find_by_key(business_key)
            except ProductNotFoundError as e:
                return self._not_found(e)

            existing_images = list(existing.images or [])
            try:
                plan_images(existing_images, keep, len(files))
            except ProductValidationError as e:
                return self._invalid(e)

            changes = reconcile_fields(update_fields)

            try:
                new_urls = self.image_store.upload_all(files)
            except StorageException as e:
                span.record_exception(e)
                return service_err(ErrorCodes.STORAGE_ERROR, str(e))

            if new_urls or keep is not None:
                changes["images"] = merge_images(existing_images, keep, new_urls)

            try:
                product = self.repository.update_by_key(business_key, changes)
            except ProductNotFoundError as e:
                self._rollback_uploads(new_urls)
                return self._not_found(e)
            except PersistenceError as e:
                self._rollback_uploads(new_urls)
                return service_err(ErrorCodes.PERSISTENCE_ERROR, e.message, field=e.field)
            except Exception as e:
                self.logger.error(f"Error updating product {business_key}: {e}", exc_info=True)
                span.record_exception(e)
                self._rollback_uploads(new_urls)
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

            dropped = removed_images(existing_images, product.images)
            if dropped:
                self.image_store.delete_all(dropped)

            self.logger.info(
                f"Updated product {business_key}: fields={sorted(changes)}, "
                f"images +{len(new_urls)}/-{len(dropped)}"
            )
            return service_ok(product)

    @BaseService.log_performance
    def set_status(self, business_key: str, status) -> ServiceResult[Product]:
        try:
            product = self.status_workflow.transition(business_key, status)
        except ProductValidationError as e:
            return self._invalid(e)
        except ProductNotFoundError as e:
            return self._not_found(e)
        except PersistenceError as e:
            return service_err(ErrorCodes.PERSISTENCE_ERROR, e.message, field=e.field)
        return service_ok(product)

    @BaseService.log_performance
    def delete_product(self, business_key: str) -> ServiceResult[bool]:
        """
        Delete a product and release its images.

        The record is removed first; image deletion is best-effort and never
        turns a successful delete into a failure.
        """
        with tracer.start_as_current_span("catalog_delete_product") as span:
            add_span_attributes(span, business_key=business_key)
            try:
                product = self.repository.delete_by_key(business_key)
            except ProductNotFoundError as e:
                return self._not_found(e)

            images = list(product.images or [])
            released = self.image_store.delete_all(images)
            if released < len(images):
                self.logger.warning(
                    f"Product {business_key} deleted but only {released}/{len(images)} image(s) were released"
                )
            else:
                self.logger.info(f"Deleted product {business_key} and {released} image(s)")
            return service_ok(True)
