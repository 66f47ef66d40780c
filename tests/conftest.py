"""tests/conftest.py - shared fixtures for all tests."""
from decimal import Decimal
from io import BytesIO

import pytest
from django.contrib.sessions.backends.db import SessionStore
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework.test import APIClient

from authentication.models import CustomUser
from inventory.models import AddOn, Category, MenuItem, Variation, VariationGroup
from merchants.models import Merchant, PaymentMethod


def make_merchant(**kw) -> Merchant:
    defaults = dict(
        name="Kape Kanto", description="Neighbourhood coffee", category="cafe",
        cuisine_type="Coffee", delivery_fee=Decimal("30.00"), minimum_order=Decimal("0.00"),
        latitude=14.5995, longitude=120.9842, active=True,
    )
    defaults.update(kw)
    return Merchant.objects.create(**defaults)


def make_category(merchant, **kw) -> Category:
    defaults = dict(name="Drinks", sort_order=1)
    defaults.update(kw)
    return Category.objects.create(merchant=merchant, **defaults)


def make_item(merchant, category, **kw) -> MenuItem:
    defaults = dict(name="Iced Latte", base_price=Decimal("120.00"))
    defaults.update(kw)
    return MenuItem.objects.create(merchant=merchant, category=category, **defaults)


def make_image(name="photo.png", fmt="PNG", content_type="image/png", size=(4, 4)) -> SimpleUploadedFile:
    """A real image file encoded with Pillow, sent with the given content type"""
    buf = BytesIO()
    Image.new("RGB", size, (200, 120, 40)).save(buf, format=fmt)
    return SimpleUploadedFile(name, buf.getvalue(), content_type=content_type)


# ── Settings ──────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def storefront_settings(settings, tmp_path):
    settings.ORDER_RATE_LIMIT_SECONDS = 0
    settings.MEDIA_ROOT = tmp_path / "media"
    settings.MEDIA_URL = "/media/"
    return settings


# ── Users & clients ───────────────────────────────────────────────────────────

@pytest.fixture
def staff_user(db):
    return CustomUser.objects.create_user(
        email="staff@clickeats.ph", password="S3cure-pass!", first_name="Ana", last_name="Cruz",
        is_staff=True,
    )


@pytest.fixture
def customer_user(db):
    return CustomUser.objects.create_user(email="buyer@example.com", password="S3cure-pass!")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def session(db):
    return SessionStore()


# ── Catalog ───────────────────────────────────────────────────────────────────

@pytest.fixture
def merchant(db):
    return make_merchant()


@pytest.fixture
def category(merchant):
    return make_category(merchant)


@pytest.fixture
def item(merchant, category):
    return make_item(merchant, category)


@pytest.fixture
def customizable_item(merchant, category):
    """Latte with a required Size group, a flat variation and two add-ons"""
    latte = make_item(merchant, category, name="Spanish Latte", base_price=Decimal("150.00"))
    size = VariationGroup.objects.create(menu_item=latte, name="Size", required=True, sort_order=1)
    Variation.objects.create(menu_item=latte, group=size, name="Regular", price=Decimal("0.00"), sort_order=1)
    Variation.objects.create(menu_item=latte, group=size, name="Large", price=Decimal("25.00"), sort_order=2)
    Variation.objects.create(menu_item=latte, name="Oat milk", price=Decimal("20.00"))
    AddOn.objects.create(menu_item=latte, name="Extra shot", price=Decimal("30.00"), category="coffee")
    AddOn.objects.create(menu_item=latte, name="Vanilla syrup", price=Decimal("15.00"), category="syrup")
    return latte


@pytest.fixture
def gcash(merchant):
    return PaymentMethod.objects.create(
        name="GCash", account_number="09171234567", account_name="Kape Kanto", merchant=merchant,
    )
