import logging
from collections.abc import Mapping

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from catalog.api.serializers import (
    ErrorResponseSerializer,
    ProductSerializer,
    ProductStatusRequestSerializer,
    ProductWriteRequestSerializer,
)
from catalog.domain.services import ErrorCodes, ProductService, service_err
from infrastructure.container import container

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.PRODUCT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.STORAGE_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorCodes.PERSISTENCE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCodes.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

IMAGE_FIELD = "images"
KEEP_IMAGES_FIELD = "keepImages"


def error_response(result) -> Response:
    http_status = ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(result.to_error_dict(), status=http_status)


def non_object_body_response(request):
    """400 response when the parsed body is a JSON array or scalar, else None."""
    if isinstance(request.data, Mapping):
        return None
    return error_response(service_err(ErrorCodes.VALIDATION_ERROR, "Request body must be an object"))


def request_payload(request) -> dict:
    """
    Flatten request.data into a plain dict of wire fields.

    Repeated form keys (e.g. several applicationAreas) become lists; uploaded
    files and the keepImages instruction are left out.
    """
    data = request.data
    skip = set(request.FILES.keys()) | {IMAGE_FIELD, KEEP_IMAGES_FIELD}
    if not hasattr(data, "getlist"):
        return {key: value for key, value in data.items() if key not in skip}

    payload = {}
    for key in data.keys():
        if key in skip:
            continue
        values = data.getlist(key)
        payload[key] = values if len(values) > 1 else values[0]
    return payload


def keep_images_instruction(request):
    data = request.data
    if KEEP_IMAGES_FIELD not in data:
        return None
    if hasattr(data, "getlist"):
        values = data.getlist(KEEP_IMAGES_FIELD)
        return values if len(values) > 1 else values[0]
    return data[KEEP_IMAGES_FIELD]


class ProductViewSet(viewsets.ViewSet):
    """
    Stone product listings, addressed by business key.
    """

    permission_classes = [AllowAny]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    lookup_field = "business_key"
    lookup_value_regex = r"[^/]+"

    def get_service(self) -> ProductService:
        return container.product_service()

    @extend_schema(
        operation_id="products_list",
        summary="List products, newest first",
        parameters=[
            OpenApiParameter(name="status", type=str, description="Filter by status (draft, pending, approved)"),
        ],
        responses={
            200: ProductSerializer(many=True),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid status filter"),
        },
        tags=["Catalog - Products"],
    )
    def list(self, request):
        result = self.get_service().list_products(status=request.query_params.get("status"))
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value, many=True).data)

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product details",
        responses={
            200: ProductSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Catalog - Products"],
    )
    def retrieve(self, request, business_key=None):
        result = self.get_service().get_product(business_key)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data)

    @extend_schema(
        operation_id="products_create",
        summary="Create a new product",
        request={"multipart/form-data": ProductWriteRequestSerializer},
        responses={
            201: OpenApiResponse(response=ProductSerializer, description="Product created successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Image upload failed"),
        },
        tags=["Catalog - Products"],
    )
    def create(self, request):
        rejected = non_object_body_response(request)
        if rejected is not None:
            return rejected
        files = request.FILES.getlist(IMAGE_FIELD)
        logger.info(f"Create product request with {len(files)} file(s)")

        result = self.get_service().create_product(request_payload(request), files)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data, status=status.HTTP_201_CREATED)

    def _update(self, request, business_key):
        rejected = non_object_body_response(request)
        if rejected is not None:
            return rejected
        files = request.FILES.getlist(IMAGE_FIELD)
        result = self.get_service().update_product(
            business_key,
            request_payload(request),
            keep_images=keep_images_instruction(request),
            files=files,
        )
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data)

    @extend_schema(
        operation_id="products_update",
        summary="Update product (any subset of fields)",
        request={"multipart/form-data": ProductWriteRequestSerializer},
        responses={
            200: OpenApiResponse(response=ProductSerializer, description="Product updated successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Image upload failed"),
        },
        tags=["Catalog - Products"],
    )
    def update(self, request, business_key=None):
        return self._update(request, business_key)

    @extend_schema(
        operation_id="products_partial_update",
        summary="Partially update product",
        request={"multipart/form-data": ProductWriteRequestSerializer},
        responses={
            200: OpenApiResponse(response=ProductSerializer, description="Product updated successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Image upload failed"),
        },
        tags=["Catalog - Products"],
    )
    def partial_update(self, request, business_key=None):
        return self._update(request, business_key)

    @extend_schema(
        operation_id="products_delete",
        summary="Delete product and its images",
        responses={
            204: OpenApiResponse(description="Product deleted successfully"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Catalog - Products"],
    )
    def destroy(self, request, business_key=None):
        result = self.get_service().delete_product(business_key)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="products_set_status",
        summary="Set product status",
        request=ProductStatusRequestSerializer,
        responses={
            200: OpenApiResponse(response=ProductSerializer, description="Status updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid status"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Catalog - Products"],
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request, business_key=None):
        rejected = non_object_body_response(request)
        if rejected is not None:
            return rejected
        result = self.get_service().set_status(business_key, request.data.get("status"))
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data)
