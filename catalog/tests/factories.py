import random
from decimal import Decimal

import factory
from django.core.files.uploadedfile import SimpleUploadedFile
from faker import Faker

from catalog.models import ApplicationArea, Product, ProductCategory, ProductStatus

fake = Faker()

BUCKET_URL = "https://test-bucket.s3.amazonaws.com"


def image_url(name: str) -> str:
    return f"{BUCKET_URL}/products/{name}"


def image_file(name: str = "slab.jpg", content_type: str = "image/jpeg", size: int = 64) -> SimpleUploadedFile:
    """A small in-memory upload, as Django hands it to a view."""
    return SimpleUploadedFile(name, b"\xff\xd8\xff" + b"\x00" * max(size - 3, 0), content_type=content_type)


class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Product

    business_key = factory.Sequence(lambda n: f"{1700000000000 + n}{n % 1000:03d}")
    name = factory.LazyFunction(lambda: f"{fake.color_name()} {random.choice(['Marble', 'Granite', 'Onyx'])}")
    price = factory.LazyFunction(lambda: Decimal(random.randint(50, 5000)))
    category = factory.LazyFunction(lambda: random.choice(ProductCategory.values))
    application_areas = factory.LazyFunction(lambda: [ApplicationArea.FLOORING, ApplicationArea.WALLS])
    description = factory.LazyFunction(lambda: fake.sentence())
    quantity_available = factory.LazyFunction(lambda: Decimal(random.randint(0, 500)))
    size = "120x60"
    thickness = "18mm"
    number_of_pieces = None
    images = factory.Sequence(lambda n: [image_url(f"1700000000000-0-slab{n}.jpg")])
    status = ProductStatus.DRAFT
