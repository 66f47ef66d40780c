"""tests/test_merchants_api.py - merchants, payment methods, promotions and delivery quotes."""
from decimal import Decimal

import pytest

from conftest import make_category, make_item, make_merchant
from inventory.models import AddOn, Category, MenuItem, Variation, VariationGroup
from merchants.models import Merchant, PaymentMethod, Promotion

pytestmark = pytest.mark.django_db


def names(response):
    body = response.json()
    rows = body["results"] if isinstance(body, dict) and "results" in body else body
    return [row.get("name") or row.get("title") for row in rows]


# ── Merchants ─────────────────────────────────────────────────────────────────

class TestMerchantList:
    def test_public_sees_active_featured_first(self, api_client):
        make_merchant(name="Bravo")
        make_merchant(name="Alpha")
        make_merchant(name="Zulu", featured=True)
        make_merchant(name="Hidden", active=False)

        r = api_client.get("/api/merchants/")
        assert r.status_code == 200
        assert names(r) == ["Zulu", "Alpha", "Bravo"]

    def test_staff_sees_inactive(self, staff_client):
        make_merchant(name="Hidden", active=False)
        r = staff_client.get("/api/merchants/")
        assert "Hidden" in names(r)

    def test_search_is_case_insensitive(self, api_client):
        make_merchant(name="Siomai House", cuisine_type="Chinese")
        make_merchant(name="Kape Kanto", cuisine_type="Coffee")
        r = api_client.get("/api/merchants/?search=chinese")
        assert names(r) == ["Siomai House"]

    def test_category_and_featured_filters(self, api_client):
        make_merchant(name="Bakery One", category="bakery", featured=True)
        make_merchant(name="Cafe One", category="cafe")
        assert names(api_client.get("/api/merchants/?category=bakery")) == ["Bakery One"]
        assert names(api_client.get("/api/merchants/?featured=true")) == ["Bakery One"]

    def test_featured_endpoint(self, api_client):
        make_merchant(name="Star", featured=True)
        make_merchant(name="Plain")
        assert names(api_client.get("/api/merchants/featured/")) == ["Star"]

    def test_inactive_detail_is_hidden_from_public(self, api_client):
        hidden = make_merchant(name="Hidden", active=False)
        r = api_client.get(f"/api/merchants/{hidden.pk}/")
        assert r.status_code == 404
        assert r.json()["error"] is True


class TestMerchantWrite:
    payload = {
        "name": "Lugaw Republic",
        "category": "restaurant",
        "delivery_fee": "25.00",
        "address": "12 Mabini St, Manila",
        "min_delivery_fee": "40.00",
        "max_delivery_fee": "120.00",
    }

    def test_anonymous_cannot_create(self, api_client):
        r = api_client.post("/api/merchants/", self.payload, format="json")
        assert r.status_code in (401, 403)

    def test_staff_create_defaults_formatted_address(self, staff_client):
        r = staff_client.post("/api/merchants/", self.payload, format="json")
        assert r.status_code == 201, r.json()
        merchant = Merchant.objects.get(name="Lugaw Republic")
        assert merchant.formatted_address == "12 Mabini St, Manila"
        assert merchant.delivery_fee_per_km == Decimal("4.00")
        assert merchant.max_delivery_distance_km == Decimal("20.00")

    def test_min_fee_above_max_is_rejected(self, staff_client):
        payload = dict(self.payload, min_delivery_fee="150.00")
        r = staff_client.post("/api/merchants/", payload, format="json")
        assert r.status_code == 400
        assert "min_delivery_fee" in r.json()["details"]

    def test_negative_pricing_is_rejected(self, staff_client, merchant):
        r = staff_client.patch(f"/api/merchants/{merchant.pk}/", {"delivery_fee_per_km": "-1"}, format="json")
        assert r.status_code == 400

    def test_partial_update_checks_bounds_against_stored_values(self, staff_client, merchant):
        merchant.max_delivery_fee = Decimal("50.00")
        merchant.save()
        r = staff_client.patch(f"/api/merchants/{merchant.pk}/", {"min_delivery_fee": "60.00"}, format="json")
        assert r.status_code == 400


class TestDuplicateMerchant:
    def test_clones_catalog(self, staff_client, customizable_item):
        source = customizable_item.merchant
        source.featured = True
        source.save()

        r = staff_client.post(f"/api/merchants/{source.pk}/duplicate/")
        assert r.status_code == 201

        copy = Merchant.objects.get(name=f"{source.name} (Copy)")
        assert copy.featured is False
        assert Category.objects.filter(merchant=copy).count() == 1

        latte = MenuItem.objects.get(merchant=copy, name="Spanish Latte")
        assert latte.category.merchant_id == copy.pk
        group = VariationGroup.objects.get(menu_item=latte, name="Size")
        assert Variation.objects.filter(menu_item=latte, group=group).count() == 2
        assert Variation.objects.filter(menu_item=latte, group__isnull=True).count() == 1
        assert AddOn.objects.filter(menu_item=latte).count() == 2
        # Source untouched
        assert MenuItem.objects.filter(merchant=source).count() == 1

    def test_requires_staff(self, api_client, merchant):
        r = api_client.post(f"/api/merchants/{merchant.pk}/duplicate/")
        assert r.status_code in (401, 403)


class TestDeliveryQuote:
    def test_quote(self, api_client):
        merchant = make_merchant(latitude=14.0, longitude=121.0, delivery_fee=Decimal("30.00"))
        r = api_client.post(
            f"/api/merchants/{merchant.pk}/delivery-quote/", {"latitude": 14.01, "longitude": 121.0}, format="json",
        )
        assert r.status_code == 200
        body = r.json()
        assert body["is_deliverable"] is True
        assert body["delivery_fee"] == "34.45"

    def test_invalid_coordinates(self, api_client, merchant):
        r = api_client.post(
            f"/api/merchants/{merchant.pk}/delivery-quote/", {"latitude": 95, "longitude": 121.0}, format="json",
        )
        assert r.status_code == 400


# ── Payment methods ───────────────────────────────────────────────────────────

class TestPaymentMethods:
    def test_merchant_list_includes_shared_methods(self, api_client, merchant, gcash):
        shared = PaymentMethod.objects.create(name="BPI", account_number="1234", account_name="ClickEats", sort_order=-1)
        other = make_merchant(name="Other")
        PaymentMethod.objects.create(name="Maya", account_number="5678", account_name="Other", merchant=other)
        PaymentMethod.objects.create(name="Old", account_number="0", account_name="x", merchant=merchant, active=False)

        r = api_client.get(f"/api/merchants/{merchant.pk}/payment-methods/")
        assert r.status_code == 200
        assert [row["id"] for row in r.json()] == [str(shared.pk), str(gcash.pk)]

    def test_patch_explicit_null_clears_merchant(self, staff_client, gcash):
        r = staff_client.patch(f"/api/payment-methods/{gcash.pk}/", {"merchant": None}, format="json")
        assert r.status_code == 200
        assert r.json()["merchant"] is None

        gcash.refresh_from_db()
        assert gcash.merchant_id is None

    def test_patch_without_merchant_keeps_it(self, staff_client, gcash, merchant):
        r = staff_client.patch(f"/api/payment-methods/{gcash.pk}/", {"account_name": "Kape Kanto Inc"}, format="json")
        assert r.status_code == 200

        gcash.refresh_from_db()
        assert gcash.merchant_id == merchant.pk
        assert gcash.account_name == "Kape Kanto Inc"

    def test_staff_only(self, api_client, gcash):
        assert api_client.get("/api/payment-methods/").status_code in (401, 403)


# ── Promotions ────────────────────────────────────────────────────────────────

class TestPromotions:
    def test_public_sees_active_in_order(self, api_client):
        Promotion.objects.create(title="Second", sort_order=2)
        Promotion.objects.create(title="First", sort_order=1)
        Promotion.objects.create(title="Off", sort_order=0, active=False)

        r = api_client.get("/api/promotions/")
        assert r.status_code == 200
        assert names(r) == ["First", "Second"]

    def test_staff_crud(self, staff_client):
        r = staff_client.post("/api/promotions/", {"title": "Free Delivery Friday", "active": False}, format="json")
        assert r.status_code == 201
        promo_id = r.json()["id"]

        assert staff_client.patch(f"/api/promotions/{promo_id}/", {"active": True}, format="json").status_code == 200
        assert staff_client.delete(f"/api/promotions/{promo_id}/").status_code == 204
        assert not Promotion.objects.exists()
