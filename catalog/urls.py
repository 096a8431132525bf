from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views import ProductViewSet, health_check

router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="product")

app_name = "catalog"

urlpatterns = [
    path("health/", health_check, name="health"),
    path("", include(router.urls)),
]
