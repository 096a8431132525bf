"""
Input validation for product mutations.

Every function here is pure: it takes raw wire values (strings from multipart
form data, or JSON values) and returns normalized Python values, raising
ProductValidationError naming the offending field on the first failure.

Wire format for ``applicationAreas``: a JSON list, a JSON-array string, a
comma-joined string, or repeated form fields are all accepted. They always
normalize to an ordered, de-duplicated list of ApplicationArea values.
"""

import json
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional, Sequence, Union

from django.conf import settings

from catalog.domain.exceptions import ProductValidationError
from catalog.domain.models import MAX_PRODUCT_IMAGES, ApplicationArea, Product, ProductCategory, ProductStatus

DEFAULT_ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif")
DEFAULT_MAX_IMAGE_SIZE = 5 * 1024 * 1024

# Largest value a DecimalField(max_digits=12, decimal_places=2) can hold
MAX_DECIMAL_VALUE = Decimal("9999999999.99")

# Largest value a PositiveIntegerField holds on every supported backend
MAX_NUMBER_OF_PIECES = 2147483647

REQUIRED_CREATE_FIELDS = ("name", "category", "applicationAreas", "price", "quantityAvailable")


class _Unset:
    """Marker for a field absent from an update payload."""

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class ProductCreateFields:
    name: str
    price: Decimal
    category: str
    application_areas: List[str]
    quantity_available: Decimal
    description: str = ""
    size: str = ""
    thickness: str = ""
    number_of_pieces: Optional[int] = None
    status: str = ProductStatus.DRAFT

    def to_model_fields(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ProductUpdateFields:
    """Partial update. Fields left as UNSET were absent from the payload."""

    name: Union[str, _Unset] = UNSET
    price: Union[Decimal, _Unset] = UNSET
    category: Union[str, _Unset] = UNSET
    application_areas: Union[List[str], _Unset] = UNSET
    quantity_available: Union[Decimal, _Unset] = UNSET
    description: Union[str, _Unset] = UNSET
    size: Union[str, _Unset] = UNSET
    thickness: Union[str, _Unset] = UNSET
    number_of_pieces: Union[Optional[int], _Unset] = UNSET
    status: Union[str, _Unset] = UNSET


def _limit(name: str, default):
    return getattr(settings, "CATALOG", {}).get(name, default)


def is_empty(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _require(field_name: str, value, reason: Optional[str] = None):
    if is_empty(value):
        raise ProductValidationError(field_name, reason or f"{field_name} is required")


def _check_length(field_name: str, model_field: str, text: str) -> str:
    max_length = Product._meta.get_field(model_field).max_length
    if max_length is not None and len(text) > max_length:
        raise ProductValidationError(field_name, f"{field_name} must be at most {max_length} characters")
    return text


def parse_name(value) -> str:
    _require("name", value, "name cannot be empty")
    return _check_length("name", "name", str(value).strip())


def _parse_decimal(field_name: str, value, allow_zero: bool) -> Decimal:
    _require(field_name, value)
    if isinstance(value, bool):
        raise ProductValidationError(field_name, f"{field_name} must be a valid number")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ProductValidationError(field_name, f"{field_name} must be a valid number")
    if not number.is_finite():
        raise ProductValidationError(field_name, f"{field_name} must be a valid number")

    if allow_zero and number < 0:
        raise ProductValidationError(field_name, f"{field_name} cannot be negative")
    if not allow_zero and number <= 0:
        raise ProductValidationError(field_name, f"{field_name} must be greater than 0")
    if number > MAX_DECIMAL_VALUE:
        raise ProductValidationError(field_name, f"{field_name} is too large")
    if number.as_tuple().exponent < -2:
        raise ProductValidationError(field_name, f"{field_name} must have at most 2 decimal places")
    return number


def parse_price(value) -> Decimal:
    return _parse_decimal("price", value, allow_zero=False)


def parse_quantity(value) -> Decimal:
    return _parse_decimal("quantityAvailable", value, allow_zero=True)


def parse_number_of_pieces(value) -> Optional[int]:
    """An empty value means "no piece count" and returns None."""
    if is_empty(value):
        return None
    if isinstance(value, bool):
        raise ProductValidationError("numberOfPieces", "numberOfPieces must be a whole number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ProductValidationError("numberOfPieces", "numberOfPieces must be a whole number")
        number = int(value)
    else:
        try:
            number = int(str(value).strip())
        except ValueError:
            raise ProductValidationError("numberOfPieces", "numberOfPieces must be a whole number")
    if number < 0:
        raise ProductValidationError("numberOfPieces", "numberOfPieces cannot be negative")
    if number > MAX_NUMBER_OF_PIECES:
        raise ProductValidationError(
            "numberOfPieces", f"numberOfPieces must be at most {MAX_NUMBER_OF_PIECES}"
        )
    return number


def parse_category(value) -> str:
    _require("category", value)
    category = str(value).strip()
    if category not in ProductCategory.values:
        raise ProductValidationError(
            "category",
            f"'{category}' is not a valid category. Must be one of: {', '.join(ProductCategory.values)}",
        )
    return category


def normalize_application_areas(value) -> List[str]:
    _require("applicationAreas", value, "At least one application area is required")

    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except ValueError:
                raise ProductValidationError("applicationAreas", "applicationAreas is not a valid JSON list")
            if not isinstance(decoded, list):
                raise ProductValidationError("applicationAreas", "applicationAreas is not a valid JSON list")
            raw_items = decoded
        else:
            raw_items = text.split(",")
    elif isinstance(value, (list, tuple)):
        raw_items = []
        for item in value:
            if isinstance(item, str):
                raw_items.extend(item.split(","))
            else:
                raw_items.append(item)
    else:
        raise ProductValidationError("applicationAreas", "applicationAreas must be a list or comma-separated string")

    areas: List[str] = []
    for item in raw_items:
        area = str(item).strip() if item is not None else ""
        if area and area not in areas:
            areas.append(area)

    if not areas:
        raise ProductValidationError("applicationAreas", "At least one application area is required")

    invalid = [area for area in areas if area not in ApplicationArea.values]
    if invalid:
        raise ProductValidationError(
            "applicationAreas",
            f"Invalid application area(s): {', '.join(invalid)}. Must be one of: {', '.join(ApplicationArea.values)}",
        )
    return areas


def parse_status(value) -> str:
    status = str(value).strip() if value is not None else ""
    if status not in ProductStatus.values:
        raise ProductValidationError(
            "status",
            f"'{status}' is not a valid status. Must be one of: {', '.join(ProductStatus.values)}",
        )
    return status


def parse_text(value) -> str:
    """Optional free text; empty or missing becomes ""."""
    if value is None:
        return ""
    return str(value).strip()


def parse_size(value) -> str:
    return _check_length("size", "size", parse_text(value))


def parse_thickness(value) -> str:
    return _check_length("thickness", "thickness", parse_text(value))


def validate_image_count(count: int, max_images: Optional[int] = None) -> int:
    max_images = max_images or _limit("MAX_IMAGES", MAX_PRODUCT_IMAGES)
    if count < 1:
        raise ProductValidationError("images", "At least one image is required")
    if count > max_images:
        raise ProductValidationError("images", f"A product can have at most {max_images} images (got {count})")
    return count


def validate_image_files(files: Sequence, required: bool) -> List:
    """Check count, content type and size of uploaded image files."""
    files = list(files or [])
    if required:
        validate_image_count(len(files))
    elif files:
        max_images = _limit("MAX_IMAGES", MAX_PRODUCT_IMAGES)
        if len(files) > max_images:
            raise ProductValidationError("images", f"A product can have at most {max_images} images (got {len(files)})")

    allowed_types = tuple(_limit("ALLOWED_IMAGE_TYPES", DEFAULT_ALLOWED_IMAGE_TYPES))
    max_size = _limit("MAX_IMAGE_SIZE", DEFAULT_MAX_IMAGE_SIZE)

    for image in files:
        name = getattr(image, "name", None) or "<unnamed>"
        content_type = getattr(image, "content_type", None)
        if content_type not in allowed_types:
            raise ProductValidationError(
                "images",
                f"'{name}' has unsupported type '{content_type}'. Allowed: {', '.join(allowed_types)}",
            )
        size = getattr(image, "size", None)
        if size is not None and size > max_size:
            raise ProductValidationError(
                "images", f"'{name}' exceeds the maximum size of {max_size // (1024 * 1024)}MB"
            )
    return files


# Wire key -> (model field, parser) for every mutable field
FIELD_PARSERS = {
    "name": ("name", parse_name),
    "price": ("price", parse_price),
    "category": ("category", parse_category),
    "applicationAreas": ("application_areas", normalize_application_areas),
    "quantityAvailable": ("quantity_available", parse_quantity),
    "description": ("description", parse_text),
    "size": ("size", parse_size),
    "thickness": ("thickness", parse_thickness),
    "numberOfPieces": ("number_of_pieces", parse_number_of_pieces),
    "status": ("status", parse_status),
}


def _reject_business_key(payload: Mapping, reason: str):
    if "businessKey" in payload:
        raise ProductValidationError("businessKey", reason)


def validate_create(payload: Mapping, files: Sequence) -> ProductCreateFields:
    """Validate a full create payload plus its uploaded image files."""
    _reject_business_key(payload, "businessKey is assigned by the server")

    for wire_key in REQUIRED_CREATE_FIELDS:
        if is_empty(payload.get(wire_key)):
            if wire_key == "applicationAreas":
                raise ProductValidationError(wire_key, "At least one application area is required")
            raise ProductValidationError(wire_key, f"{wire_key} is required")

    values = {}
    for wire_key, (model_field, parser) in FIELD_PARSERS.items():
        if wire_key in payload:
            values[model_field] = parser(payload[wire_key])

    validate_image_files(files, required=True)
    return ProductCreateFields(**values)


def validate_update(payload: Mapping) -> ProductUpdateFields:
    """Validate only the fields present in a partial update payload."""
    _reject_business_key(payload, "businessKey cannot be changed")

    values = {}
    for wire_key in payload:
        if wire_key not in FIELD_PARSERS:
            continue
        model_field, parser = FIELD_PARSERS[wire_key]
        values[model_field] = parser(payload[wire_key])

    return ProductUpdateFields(**values)
