from rest_framework import serializers

from catalog.domain.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """
    Flat camelCase representation of a product.

    Older records may predate the size/thickness/numberOfPieces fields or store
    application areas as one comma-joined string; both are normalized on read.
    """

    businessKey = serializers.CharField(source="business_key", read_only=True)
    applicationAreas = serializers.SerializerMethodField()
    quantityAvailable = serializers.DecimalField(
        source="quantity_available", max_digits=12, decimal_places=2, read_only=True
    )
    size = serializers.SerializerMethodField()
    thickness = serializers.SerializerMethodField()
    numberOfPieces = serializers.IntegerField(source="number_of_pieces", read_only=True, allow_null=True)
    images = serializers.ListField(child=serializers.URLField(), read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "businessKey",
            "name",
            "price",
            "category",
            "applicationAreas",
            "description",
            "quantityAvailable",
            "size",
            "thickness",
            "numberOfPieces",
            "images",
            "status",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_applicationAreas(self, obj) -> list:
        areas = obj.application_areas
        if isinstance(areas, str):
            return [area.strip() for area in areas.split(",") if area.strip()]
        return list(areas or [])

    def get_size(self, obj) -> str:
        return obj.size or ""

    def get_thickness(self, obj) -> str:
        return obj.thickness or ""


class ProductWriteRequestSerializer(serializers.Serializer):
    """
    Multipart body for create/update, used for OpenAPI documentation only.

    Validation happens in catalog.domain.services.validator.
    """

    name = serializers.CharField(required=False)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    category = serializers.CharField(required=False)
    applicationAreas = serializers.CharField(
        required=False, help_text="List, JSON array or comma-separated string of application areas"
    )
    description = serializers.CharField(required=False, allow_blank=True)
    quantityAvailable = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    size = serializers.CharField(required=False, allow_blank=True)
    thickness = serializers.CharField(required=False, allow_blank=True)
    numberOfPieces = serializers.CharField(required=False, allow_blank=True, help_text="Empty clears the value")
    status = serializers.ChoiceField(choices=["draft", "pending", "approved"], required=False)
    keepImages = serializers.CharField(
        required=False, help_text="Update only: JSON list of existing image URLs to keep"
    )
    images = serializers.ListField(child=serializers.FileField(), required=False)


class ProductStatusRequestSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=["draft", "pending", "approved"])
