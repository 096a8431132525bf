from .product_serializers import ProductSerializer, ProductStatusRequestSerializer, ProductWriteRequestSerializer
from .response_serializers import ErrorResponseSerializer, HealthResponseSerializer


__all__ = [
    "ProductSerializer",
    "ProductWriteRequestSerializer",
    "ProductStatusRequestSerializer",
    "ErrorResponseSerializer",
    "HealthResponseSerializer",
]
