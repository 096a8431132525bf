from .health_views import health_check
from .product_views import ProductViewSet


__all__ = ["ProductViewSet", "health_check"]
