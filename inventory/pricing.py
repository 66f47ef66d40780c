"""Effective price of menu items and cart lines."""
from decimal import Decimal

from django.utils import timezone


def is_discount_active(item, now=None):
    """A discount applies when enabled, priced, and ``now`` sits inside the optional window"""
    if not item.discount_active or item.discount_price is None:
        return False

    now = now or timezone.now()
    if item.discount_start_date and now < item.discount_start_date:
        return False
    if item.discount_end_date and now > item.discount_end_date:
        return False
    return True


def effective_price(item, now=None):
    if is_discount_active(item, now):
        return item.discount_price
    return item.base_price


def line_unit_price(item, variation=None, selected_variations=None, add_ons=None, now=None):
    """
    Price of one unit of a cart line.

    ``selected_variations`` is an iterable of grouped Variation rows and
    ``add_ons`` an iterable of ``(AddOn, quantity)`` pairs.
    """
    price = Decimal(effective_price(item, now))
    if variation is not None:
        price += variation.price
    for selected in selected_variations or ():
        price += selected.price
    for add_on, quantity in add_ons or ():
        price += add_on.price * quantity
    return price
