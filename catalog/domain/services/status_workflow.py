"""
Listing status lifecycle.

Statuses are draft, pending and approved. Any status can move to any other
(including back to draft after approval); the only rule is that the target
must be one of the three.
"""

import logging

from catalog.domain.models import Product
from catalog.domain.repositories import ProductRepository
from catalog.domain.services.validator import parse_status

logger = logging.getLogger(__name__)


class StatusWorkflow:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def transition(self, business_key: str, target_status) -> Product:
        """
        Overwrite the status of a product.

        Raises:
            ProductValidationError: target_status is not a valid status
            ProductNotFoundError: no product has this business key
        """
        status = parse_status(target_status)
        product = self.repository.update_by_key(business_key, {"status": status})
        logger.info(f"Product {business_key} status set to {status}")
        return product
