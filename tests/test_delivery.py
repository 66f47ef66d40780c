"""tests/test_delivery.py - distance based delivery pricing."""
from decimal import Decimal

import pytest

from merchants.delivery import calculate_delivery_fee, haversine_km, quote_delivery
from merchants.models import Merchant


def located_merchant(**kw) -> Merchant:
    defaults = dict(
        name="Lutong Bahay", latitude=14.0, longitude=121.0, delivery_fee=Decimal("30.00"),
        delivery_fee_per_km=Decimal("4.00"), max_delivery_distance_km=Decimal("20.00"),
    )
    defaults.update(kw)
    return Merchant(**defaults)


class TestHaversine:
    def test_same_point(self):
        assert haversine_km(14.5, 121.0, 14.5, 121.0) == 0.0

    def test_one_degree_of_latitude(self):
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=0.001)

    def test_symmetric(self):
        assert haversine_km(14.6, 120.98, 14.55, 121.05) == haversine_km(14.55, 121.05, 14.6, 120.98)


class TestDeliveryFee:
    def test_linear_fee(self):
        assert calculate_delivery_fee(2.5, Decimal("30"), Decimal("4")) == Decimal("40.00")

    def test_min_clamp(self):
        assert calculate_delivery_fee(1, Decimal("10"), Decimal("4"), min_fee=Decimal("49")) == Decimal("49.00")

    def test_max_clamp(self):
        assert calculate_delivery_fee(10, Decimal("30"), Decimal("4"), max_fee=Decimal("60")) == Decimal("60.00")

    def test_rounds_to_centavos(self):
        assert calculate_delivery_fee(1.112, Decimal("30"), Decimal("4")) == Decimal("34.45")


class TestQuote:
    def test_deliverable_quote(self):
        quote = quote_delivery(located_merchant(), 14.01, 121.0)
        assert quote["is_deliverable"]
        assert quote["distance_km"] == pytest.approx(1.112, abs=0.001)
        assert quote["delivery_fee"] == Decimal("34.45")
        assert quote["breakdown"]["base_fee"] == "30.00"

    def test_base_fee_overrides_flat_fee(self):
        quote = quote_delivery(located_merchant(base_delivery_fee=Decimal("10.00")), 14.01, 121.0)
        assert quote["delivery_fee"] == Decimal("14.45")

    def test_beyond_max_distance(self):
        quote = quote_delivery(located_merchant(), 15.0, 121.0)
        assert not quote["is_deliverable"]
        assert quote["delivery_fee"] is None
        assert quote["reason"] == "out_of_range"

    def test_no_distance_limit(self):
        quote = quote_delivery(located_merchant(max_delivery_distance_km=None), 15.0, 121.0)
        assert quote["is_deliverable"]

    def test_merchant_without_location(self):
        quote = quote_delivery(located_merchant(latitude=None, longitude=None), 14.01, 121.0)
        assert not quote["is_deliverable"]
        assert quote["reason"] == "merchant_location_missing"
        assert quote["distance_km"] is None
