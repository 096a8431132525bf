from .product import (
    MAX_PRODUCT_IMAGES,
    ApplicationArea,
    Product,
    ProductCategory,
    ProductStatus,
    generate_business_key,
)


__all__ = [
    "Product",
    "ProductCategory",
    "ApplicationArea",
    "ProductStatus",
    "MAX_PRODUCT_IMAGES",
    "generate_business_key",
]
