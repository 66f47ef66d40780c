"""
Distance based delivery pricing.

A quote is computed from the merchant's coordinates and the customer's drop
off point. The fee is ``base + distance * per_km`` clamped to the merchant's
optional min/max bounds; merchants without coordinates, or drop offs beyond
``max_delivery_distance_km``, are not deliverable.
"""
import math
from decimal import Decimal, ROUND_HALF_UP

EARTH_RADIUS_KM = 6371

TWO_PLACES = Decimal('0.01')


def haversine_km(lat1, lng1, lat2, lng2):
    """Great-circle distance between two points, in km rounded to 3 decimals"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 3)


def calculate_delivery_fee(distance_km, base_fee, per_km, min_fee=None, max_fee=None):
    fee = Decimal(str(base_fee or 0)) + Decimal(str(distance_km)) * Decimal(str(per_km or 0))
    if min_fee is not None:
        fee = max(fee, Decimal(str(min_fee)))
    if max_fee is not None:
        fee = min(fee, Decimal(str(max_fee)))
    return fee.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def quote_delivery(merchant, latitude, longitude):
    """Build the delivery quote returned to the storefront and stored on orders"""
    base_fee = merchant.base_delivery_fee
    if base_fee is None:
        base_fee = merchant.delivery_fee

    breakdown = {
        'base_fee': str(base_fee),
        'per_km': str(merchant.delivery_fee_per_km),
        'min_fee': None if merchant.min_delivery_fee is None else str(merchant.min_delivery_fee),
        'max_fee': None if merchant.max_delivery_fee is None else str(merchant.max_delivery_fee),
        'max_distance_km': (
            None if merchant.max_delivery_distance_km is None else str(merchant.max_delivery_distance_km)
        ),
    }

    if not merchant.has_location:
        return {
            'merchant_id': str(merchant.pk),
            'distance_km': None,
            'delivery_fee': None,
            'is_deliverable': False,
            'reason': 'merchant_location_missing',
            'breakdown': breakdown,
        }

    distance_km = haversine_km(merchant.latitude, merchant.longitude, latitude, longitude)

    max_distance = merchant.max_delivery_distance_km
    if max_distance is not None and Decimal(str(distance_km)) > max_distance:
        return {
            'merchant_id': str(merchant.pk),
            'distance_km': distance_km,
            'delivery_fee': None,
            'is_deliverable': False,
            'reason': 'out_of_range',
            'breakdown': breakdown,
        }

    fee = calculate_delivery_fee(
        distance_km,
        base_fee,
        merchant.delivery_fee_per_km,
        merchant.min_delivery_fee,
        merchant.max_delivery_fee,
    )
    return {
        'merchant_id': str(merchant.pk),
        'distance_km': distance_km,
        'delivery_fee': fee,
        'is_deliverable': True,
        'reason': None,
        'breakdown': breakdown,
    }
