"""Stock bookkeeping for tracked menu items."""
import logging
import uuid
from collections import OrderedDict

from django.db import transaction
from django.db.models import F
from rest_framework import serializers

from .models import MenuItem

logger = logging.getLogger(__name__)


class InsufficientStock(serializers.ValidationError):
    def __init__(self, item, requested):
        self.item = item
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {item.name}: {item.stock_quantity} left, {requested} requested"
        )


def _merge_quantities(lines):
    totals = OrderedDict()
    for line in lines:
        quantity = int(line.get('quantity') or 0)
        if quantity <= 0:
            continue
        try:
            key = str(uuid.UUID(str(line['id'])))
        except (KeyError, ValueError):
            raise serializers.ValidationError(f"Invalid menu item id: {line.get('id')!r}")
        totals[key] = totals.get(key, 0) + quantity
    return totals


@transaction.atomic
def ensure_stock(lines):
    """Raise InsufficientStock for the first tracked item that cannot cover its quantity"""
    totals = _merge_quantities(lines)
    items = MenuItem.objects.select_for_update().filter(pk__in=list(totals.keys()))
    for item in items:
        if item.stock_is_tracked and item.stock_quantity < totals[str(item.pk)]:
            raise InsufficientStock(item, totals[str(item.pk)])


@transaction.atomic
def decrement_menu_item_stock(lines):
    """
    Subtract ordered quantities from tracked items.

    ``lines`` is a list of ``{"id": <menu item id>, "quantity": n}``. Rows are
    locked for the duration of the transaction, repeated ids are summed,
    untracked items are skipped, and stock never drops below zero. Returns the
    updated items.
    """
    totals = _merge_quantities(lines)
    if not totals:
        return []

    items = MenuItem.objects.select_for_update().filter(pk__in=list(totals.keys()))
    updated = []
    for item in items:
        if not item.stock_is_tracked:
            continue
        requested = totals[str(item.pk)]
        item.stock_quantity = max(0, item.stock_quantity - requested)
        item.save(update_fields=['stock_quantity', 'updated_at'])
        logger.info(
            "Decremented stock of %s by %s, %s left (available=%s)",
            item.pk, requested, item.stock_quantity, item.available,
        )
        updated.append(item)
    return updated


def low_stock_items(merchant=None):
    queryset = MenuItem.objects.filter(
        track_inventory=True,
        stock_quantity__isnull=False,
        stock_quantity__lte=F('low_stock_threshold'),
    ).select_related('merchant', 'category')
    if merchant is not None:
        queryset = queryset.filter(merchant=merchant)
    return queryset.order_by('stock_quantity', 'name')
