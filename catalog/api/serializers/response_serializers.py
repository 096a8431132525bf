"""
Response Serializers for Catalog API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    error = serializers.CharField(help_text="Error code identifier")
    detail = serializers.CharField(help_text="Human-readable error message")
    field = serializers.CharField(help_text="Offending input field (validation errors only)", required=False)


class HealthResponseSerializer(serializers.Serializer):
    status = serializers.CharField()
    message = serializers.CharField()
    dbStatus = serializers.ChoiceField(choices=["connected", "disconnected"])
