from catalog.domain.models import ApplicationArea, Product, ProductCategory, ProductStatus


__all__ = [
    "Product",
    "ProductCategory",
    "ApplicationArea",
    "ProductStatus",
]
