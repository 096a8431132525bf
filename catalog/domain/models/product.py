import secrets
import time

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class ProductCategory(models.TextChoices):
    IMPORTED_MARBLE = "Imported Marble", "Imported Marble"
    IMPORTED_GRANITE = "Imported Granite", "Imported Granite"
    EXOTICS = "Exotics", "Exotics"
    ONYX = "Onyx", "Onyx"
    TRAVERTINE = "Travertine", "Travertine"
    INDIAN_MARBLE = "Indian Marble", "Indian Marble"
    INDIAN_GRANITE = "Indian Granite", "Indian Granite"
    SEMI_PRECIOUS_STONE = "Semi Precious Stone", "Semi Precious Stone"
    QUARTZITE = "Quartzite", "Quartzite"
    SANDSTONE = "Sandstone", "Sandstone"


class ApplicationArea(models.TextChoices):
    FLOORING = "Flooring", "Flooring"
    COUNTERTOPS = "Countertops", "Countertops"
    WALLS = "Walls", "Walls"
    EXTERIOR = "Exterior", "Exterior"
    INTERIOR = "Interior", "Interior"


class ProductStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"


MAX_PRODUCT_IMAGES = 10


def generate_business_key() -> str:
    """Millisecond timestamp followed by three random digits."""
    return f"{int(time.time() * 1000)}{secrets.randbelow(1000):03d}"


def validate_application_areas(value):
    if not isinstance(value, list) or not value:
        raise ValidationError("At least one application area is required")
    invalid = [area for area in value if area not in ApplicationArea.values]
    if invalid:
        raise ValidationError(
            f"Invalid application area(s): {', '.join(map(str, invalid))}. "
            f"Must be one of: {', '.join(ApplicationArea.values)}"
        )


def validate_images(value):
    if not isinstance(value, list) or not value:
        raise ValidationError("At least one image is required")
    if len(value) > MAX_PRODUCT_IMAGES:
        raise ValidationError(f"A product can have at most {MAX_PRODUCT_IMAGES} images")
    if not all(isinstance(url, str) and url for url in value):
        raise ValidationError("Images must be non-empty URL strings")


class Product(models.Model):
    """A stone product listing. ``business_key`` is the only identifier exposed outside the database."""

    business_key = models.CharField(max_length=32, unique=True, default=generate_business_key, editable=False)
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    category = models.CharField(max_length=50, choices=ProductCategory.choices)
    application_areas = models.JSONField(default=list, validators=[validate_application_areas])
    description = models.TextField(blank=True, default="")
    quantity_available = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])

    # Dimensions
    size = models.CharField(max_length=255, blank=True, default="")
    thickness = models.CharField(max_length=255, blank=True, default="")
    number_of_pieces = models.PositiveIntegerField(null=True, blank=True, default=None)

    images = models.JSONField(default=list, validators=[validate_images])
    status = models.CharField(max_length=20, choices=ProductStatus.choices, default=ProductStatus.DRAFT)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "catalog"
        indexes = [
            models.Index(fields=["status", "-created_at"], name="product_status_created_idx"),
            models.Index(fields=["category"], name="product_category_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.business_key})"
