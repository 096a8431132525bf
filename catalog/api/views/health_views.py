import logging

from django.db import DatabaseError, connection
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from catalog.api.serializers import HealthResponseSerializer

logger = logging.getLogger(__name__)


@extend_schema(
    operation_id="health_check",
    summary="Service and database health",
    responses={200: HealthResponseSerializer},
    tags=["System"],
)
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    try:
        connection.ensure_connection()
        db_status = "connected"
    except DatabaseError as e:
        logger.error(f"Health check could not reach the database: {e}")
        db_status = "disconnected"

    return Response({"status": "ok", "message": "API is running", "dbStatus": db_status})
