import logging
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers
from rest_framework.exceptions import Throttled

from clickeats.uploads import store_image
from inventory.stock import decrement_menu_item_stock, ensure_stock
from merchants.delivery import quote_delivery
from merchants.models import Merchant

from .cart import CartError
from .models import Order, OrderItem

logger = logging.getLogger(__name__)


def get_client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def check_rate_limit(ip_address):
    """One checkout per client IP per ORDER_RATE_LIMIT_SECONDS window"""
    window = settings.ORDER_RATE_LIMIT_SECONDS
    if not window or not ip_address:
        return
    since = timezone.now() - timedelta(seconds=window)
    last = (
        Order.objects.filter(ip_address=ip_address, created_at__gte=since)
        .order_by('-created_at')
        .values_list('created_at', flat=True)
        .first()
    )
    if last is not None:
        wait = window - int((timezone.now() - last).total_seconds())
        raise Throttled(
            wait=max(wait, 1),
            detail="Too many orders: please wait before placing another order.",
        )


def _delivery_terms(merchant, data):
    """Delivery fee, distance and breakdown for one merchant's order"""
    if data['service_type'] != 'delivery':
        return Decimal('0.00'), None, None

    latitude = data.get('delivery_latitude')
    longitude = data.get('delivery_longitude')
    if latitude is None or longitude is None:
        # No drop off pin, fall back to the flat fee
        return merchant.delivery_fee, None, {'flat_fee': str(merchant.delivery_fee)}

    quote = quote_delivery(merchant, latitude, longitude)
    if not quote['is_deliverable']:
        raise serializers.ValidationError(
            {'address': f"{merchant.name} does not deliver to this address ({quote['reason']})."}
        )
    return quote['delivery_fee'], Decimal(str(quote['distance_km'])), quote['breakdown']


@transaction.atomic
def place_orders(cart, data, ip_address=None, request=None):
    """
    Turn the cart into one order per merchant.

    Everything is checked before the receipt is stored or any row is
    written: item availability, minimum order, delivery range, payment
    method and stock. Stock is then decremented and the cart cleared.
    """
    if not len(cart):
        raise CartError("Your cart is empty.")

    for line in cart:
        if not line.item.available:
            raise CartError(f"{line.item.name} is no longer available.")

    grouped = cart.lines_by_merchant()
    merchants = Merchant.objects.in_bulk(list(grouped.keys()))
    payment_method = data.get('payment_method')

    plans = []
    for merchant_id, lines in grouped.items():
        merchant = merchants[merchant_id]
        if not merchant.active:
            raise CartError(f"{merchant.name} is not accepting orders.")

        subtotal = sum((line.subtotal for line in lines), Decimal('0.00'))
        if subtotal < merchant.minimum_order:
            raise serializers.ValidationError(
                f"Minimum order for {merchant.name} is {merchant.minimum_order}; your subtotal is {subtotal}."
            )

        if payment_method is not None and not payment_method.is_usable_by(merchant):
            raise serializers.ValidationError(
                {'payment_method': f"{payment_method.name} is not accepted by {merchant.name}."}
            )

        plans.append((merchant, lines, _delivery_terms(merchant, data)))

    ensure_stock(cart.stock_lines())

    receipt_url = None
    if data.get('receipt'):
        receipt_url = store_image(data['receipt'], 'receipts', request=request)

    orders = []
    for merchant, lines, (delivery_fee, distance_km, breakdown) in plans:
        order = Order.objects.create(
            merchant=merchant,
            customer_name=data['customer_name'],
            contact_number=data['contact_number'],
            service_type=data['service_type'],
            address=data.get('address') or None,
            landmark=data.get('landmark') or None,
            delivery_latitude=data.get('delivery_latitude'),
            delivery_longitude=data.get('delivery_longitude'),
            distance_km=distance_km,
            delivery_fee=delivery_fee,
            delivery_fee_breakdown=breakdown,
            pickup_time=data.get('pickup_time') or None,
            party_size=data.get('party_size'),
            dine_in_time=data.get('dine_in_time'),
            payment_method=payment_method,
            reference_number=data.get('reference_number') or None,
            receipt_url=receipt_url,
            notes=data.get('notes') or None,
            ip_address=ip_address,
        )
        for line in lines:
            OrderItem.objects.create(
                order=order,
                menu_item=line.item,
                name=line.item.name,
                variation=line.describe_variation(),
                add_ons=line.describe_add_ons(),
                unit_price=line.unit_price,
                quantity=line.quantity,
                subtotal=line.subtotal,
            )
        order.refresh_from_db()
        orders.append(order)
        logger.info(
            "Order %s (#%s) placed for %s: %s line(s), total %s",
            order.pk, order.token, merchant.name, len(lines), order.total,
        )

    decrement_menu_item_stock(cart.stock_lines())
    cart.clear()
    return orders
