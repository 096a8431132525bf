# Generated manually for the initial product catalog schema
import django.core.validators
from django.db import migrations, models

import catalog.domain.models.product


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "business_key",
                    models.CharField(
                        default=catalog.domain.models.product.generate_business_key,
                        editable=False,
                        max_length=32,
                        unique=True,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("Imported Marble", "Imported Marble"),
                            ("Imported Granite", "Imported Granite"),
                            ("Exotics", "Exotics"),
                            ("Onyx", "Onyx"),
                            ("Travertine", "Travertine"),
                            ("Indian Marble", "Indian Marble"),
                            ("Indian Granite", "Indian Granite"),
                            ("Semi Precious Stone", "Semi Precious Stone"),
                            ("Quartzite", "Quartzite"),
                            ("Sandstone", "Sandstone"),
                        ],
                        max_length=50,
                    ),
                ),
                (
                    "application_areas",
                    models.JSONField(
                        default=list,
                        validators=[catalog.domain.models.product.validate_application_areas],
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                (
                    "quantity_available",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("size", models.CharField(blank=True, default="", max_length=255)),
                ("thickness", models.CharField(blank=True, default="", max_length=255)),
                ("number_of_pieces", models.PositiveIntegerField(blank=True, default=None, null=True)),
                (
                    "images",
                    models.JSONField(default=list, validators=[catalog.domain.models.product.validate_images]),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("pending", "Pending"), ("approved", "Approved")],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "-created_at"], name="product_status_created_idx"),
                    models.Index(fields=["category"], name="product_category_idx"),
                ],
            },
        ),
    ]
