from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from .product_service import ProductService
from .status_workflow import StatusWorkflow


__all__ = [
    "BaseService",
    "ErrorCodes",
    "ServiceResult",
    "service_err",
    "service_ok",
    "ProductService",
    "StatusWorkflow",
]
