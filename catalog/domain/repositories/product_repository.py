"""
Persistence boundary for products.

Every write runs the model's own field validators (full_clean) before touching
the database, as a second line of defense behind the Validator. Constraint
violations surface as PersistenceError and unknown business keys as
ProductNotFoundError.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from catalog.domain.exceptions import PersistenceError, ProductNotFoundError
from catalog.domain.models import Product

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = ("id", "business_key", "created_at")


class ProductRepository:
    def __init__(self, model=Product):
        self.model = model

    def _full_clean(self, product: Product) -> None:
        try:
            product.full_clean()
        except DjangoValidationError as e:
            field, messages = next(iter(e.message_dict.items()))
            raise PersistenceError(f"{field}: {' '.join(messages)}", field=field) from e

    def insert(self, fields: Dict[str, Any]) -> Product:
        """
        Insert a new product.

        Raises:
            PersistenceError: business key collision or constraint violation
        """
        product = self.model(**fields)
        self._full_clean(product)
        try:
            with transaction.atomic():
                product.save(force_insert=True)
        except IntegrityError as e:
            logger.error(f"Integrity error inserting product {product.business_key}: {e}")
            raise PersistenceError(f"Could not insert product: {e}") from e

        logger.info(f"Inserted product {product.business_key}")
        return product

    def find_by_key(self, business_key: str) -> Product:
        try:
            return self.model.objects.get(business_key=business_key)
        except self.model.DoesNotExist:
            raise ProductNotFoundError(business_key)

    def find_all(self, status: Optional[str] = None) -> List[Product]:
        """All products, newest first, optionally restricted to one status."""
        queryset = self.model.objects.all()
        if status:
            queryset = queryset.filter(status=status)
        return list(queryset.order_by("-created_at", "-id"))

    def update_by_key(self, business_key: str, changes: Dict[str, Any]) -> Product:
        """
        Apply field changes to an existing product.

        Raises:
            ProductNotFoundError: no product has this business key
            PersistenceError: an immutable field was targeted or a constraint failed
        """
        immutable = [name for name in changes if name in IMMUTABLE_FIELDS]
        if immutable:
            raise PersistenceError(f"{immutable[0]} cannot be changed", field=immutable[0])

        try:
            with transaction.atomic():
                try:
                    product = self.model.objects.select_for_update().get(business_key=business_key)
                except self.model.DoesNotExist:
                    raise ProductNotFoundError(business_key)

                for name, value in changes.items():
                    setattr(product, name, value)

                self._full_clean(product)
                product.save(update_fields=[*changes.keys(), "updated_at"])
        except IntegrityError as e:
            logger.error(f"Integrity error updating product {business_key}: {e}")
            raise PersistenceError(f"Could not update product: {e}") from e

        logger.info(f"Updated product {business_key}, fields={list(changes)}")
        return product

    def delete_by_key(self, business_key: str) -> Product:
        """
        Delete a product and return the removed record (its images are still readable).

        Raises:
            ProductNotFoundError: no product has this business key
        """
        with transaction.atomic():
            try:
                product = self.model.objects.select_for_update().get(business_key=business_key)
            except self.model.DoesNotExist:
                raise ProductNotFoundError(business_key)
            product.delete()

        logger.info(f"Deleted product {business_key}")
        return product

    def iter_image_urls(self) -> Iterator[str]:
        for images in self.model.objects.values_list("images", flat=True).iterator():
            for url in images or []:
                yield url
