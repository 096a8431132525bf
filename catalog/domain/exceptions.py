"""
Domain exceptions for the product catalog.

Raised below the service layer; ProductService converts them into
ServiceResult error codes.
"""

from typing import Optional


class CatalogError(Exception):
    """Base exception for catalog domain errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ProductValidationError(CatalogError):
    """Malformed, out-of-range or out-of-set input for a single field."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class ProductNotFoundError(CatalogError):
    def __init__(self, business_key: str):
        self.business_key = business_key
        super().__init__(f"Product {business_key} not found")


class PersistenceError(CatalogError):
    """Uniqueness or constraint violation at the repository boundary."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)
