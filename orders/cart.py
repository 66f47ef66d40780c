"""
Session cart.

The session only stores ids and quantities. Every request rebuilds the lines
against the database, so prices and availability are always current and
lines that can no longer be ordered are dropped.
"""
import logging
from collections import OrderedDict
from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from inventory.models import AddOn, MenuItem, Variation
from inventory.pricing import line_unit_price

logger = logging.getLogger(__name__)


class CartError(serializers.ValidationError):
    pass


def normalize_add_ons(add_ons):
    """Merge repeated add-ons and order them by id: ``[(AddOn, quantity), ...]``"""
    merged = OrderedDict()
    for add_on, quantity in add_ons or ():
        quantity = int(quantity)
        if quantity <= 0:
            continue
        key = str(add_on.pk)
        if key in merged:
            merged[key] = (add_on, merged[key][1] + quantity)
        else:
            merged[key] = (add_on, quantity)
    return [merged[key] for key in sorted(merged)]


def build_line_key(item_id, variation_id=None, selected_variations=None, add_ons=None):
    """
    Identity of a cart line.

    ``selected_variations`` maps group id to variation id and ``add_ons`` is a
    list of ``(add_on_id, quantity)``; both are sorted so input order never
    changes the key.
    """
    groups = '|'.join(
        f"{group_id}:{variation}" for group_id, variation in sorted(
            (str(g), str(v)) for g, v in (selected_variations or {}).items()
        )
    )
    extras = ','.join(
        f"{add_on_id}-{quantity}" for add_on_id, quantity in sorted(
            (str(a), int(q)) for a, q in (add_ons or ())
        )
    )
    return f"{item_id}-{variation_id or 'default'}-{groups or 'no-groups'}-{extras or 'none'}"


class CartLine:
    def __init__(self, item, quantity, variation=None, selected_variations=None, add_ons=None):
        self.item = item
        self.quantity = quantity
        self.variation = variation
        # {group_id: Variation}
        self.selected_variations = selected_variations or {}
        self.add_ons = normalize_add_ons(add_ons)

    @property
    def key(self):
        return build_line_key(
            self.item.pk,
            self.variation.pk if self.variation else None,
            {group_id: variation.pk for group_id, variation in self.selected_variations.items()},
            [(add_on.pk, quantity) for add_on, quantity in self.add_ons],
        )

    @property
    def merchant_id(self):
        return self.item.merchant_id

    @property
    def unit_price(self):
        return line_unit_price(
            self.item,
            self.variation,
            self.selected_variations.values(),
            self.add_ons,
        )

    @property
    def subtotal(self):
        return self.unit_price * self.quantity

    def describe_variation(self):
        if self.variation is None and not self.selected_variations:
            return None
        data = {}
        if self.variation is not None:
            data['id'] = str(self.variation.pk)
            data['name'] = self.variation.name
            data['price'] = str(self.variation.price)
        if self.selected_variations:
            data['groups'] = [
                {
                    'group_id': str(group_id),
                    'group': variation.group.name if variation.group_id else None,
                    'id': str(variation.pk),
                    'name': variation.name,
                    'price': str(variation.price),
                }
                for group_id, variation in sorted(self.selected_variations.items(), key=lambda pair: str(pair[0]))
            ]
        return data

    def describe_add_ons(self):
        return [
            {'id': str(add_on.pk), 'name': add_on.name, 'price': str(add_on.price), 'quantity': quantity}
            for add_on, quantity in self.add_ons
        ]

    def as_session(self):
        return {
            'item': str(self.item.pk),
            'quantity': self.quantity,
            'variation': str(self.variation.pk) if self.variation else None,
            'groups': {
                str(group_id): str(variation.pk) for group_id, variation in self.selected_variations.items()
            },
            'add_ons': [[str(add_on.pk), quantity] for add_on, quantity in self.add_ons],
        }


class Cart:
    """A customer's cart persisted in the Django session"""

    def __init__(self, session):
        self.session = session
        self.lines = OrderedDict()
        self._load(session.get(settings.CART_SESSION_KEY, []))

    def _load(self, stored):
        if not stored:
            return

        item_ids = {entry['item'] for entry in stored}
        variation_ids = set()
        add_on_ids = set()
        for entry in stored:
            if entry.get('variation'):
                variation_ids.add(entry['variation'])
            variation_ids.update((entry.get('groups') or {}).values())
            add_on_ids.update(add_on_id for add_on_id, _ in entry.get('add_ons') or ())

        items = {
            str(item.pk): item
            for item in MenuItem.objects.filter(
                pk__in=item_ids, available=True, merchant__active=True,
            ).select_related('merchant')
        }
        variations = {
            str(variation.pk): variation
            for variation in Variation.objects.filter(pk__in=variation_ids).select_related('group')
        }
        add_ons = {str(add_on.pk): add_on for add_on in AddOn.objects.filter(pk__in=add_on_ids)}

        dropped = 0
        for entry in stored:
            try:
                line = CartLine(
                    items[entry['item']],
                    int(entry['quantity']),
                    variations[entry['variation']] if entry.get('variation') else None,
                    {
                        group_id: variations[variation_id]
                        for group_id, variation_id in (entry.get('groups') or {}).items()
                    },
                    [(add_ons[add_on_id], quantity) for add_on_id, quantity in entry.get('add_ons') or ()],
                )
            except KeyError:
                dropped += 1
                continue
            self.lines[line.key] = line

        if dropped:
            logger.info("Dropped %s stale cart line(s) from session", dropped)
            self.save()

    def save(self):
        self.session[settings.CART_SESSION_KEY] = [line.as_session() for line in self.lines.values()]
        self.session.modified = True

    def __iter__(self):
        return iter(self.lines.values())

    def __len__(self):
        return len(self.lines)

    def _validate_selection(self, item, variation, selected_variations, add_ons):
        if not item.available:
            raise CartError(f"{item.name} is currently unavailable.")
        if not item.merchant.active:
            raise CartError(f"{item.merchant.name} is not accepting orders.")

        if variation is not None and (variation.menu_item_id != item.pk or variation.group_id is not None):
            raise CartError(f"Variation {variation.name} is not offered for {item.name}.")

        for group_id, selected in selected_variations.items():
            if selected.menu_item_id != item.pk or str(selected.group_id) != str(group_id):
                raise CartError(f"Variation {selected.name} is not offered for {item.name}.")

        chosen_groups = {str(group_id) for group_id in selected_variations}
        for group in item.variation_groups.all():
            if group.required and str(group.pk) not in chosen_groups:
                raise CartError(f"Please choose a {group.name} for {item.name}.")

        for add_on, quantity in add_ons:
            if add_on.menu_item_id != item.pk:
                raise CartError(f"Add-on {add_on.name} is not offered for {item.name}.")
            if int(quantity) <= 0:
                raise CartError("Add-on quantity must be at least 1.")

    def add(self, item, quantity=1, variation=None, add_ons=None, selected_variations=None):
        """Add a configured item; an identical configuration increments the existing line"""
        if quantity <= 0:
            raise CartError("Quantity must be at least 1.")
        selected_variations = {str(group_id): v for group_id, v in (selected_variations or {}).items()}
        add_ons = list(add_ons or ())
        self._validate_selection(item, variation, selected_variations, add_ons)

        line = CartLine(item, quantity, variation, selected_variations, add_ons)
        existing = self.lines.get(line.key)
        if existing is not None:
            existing.quantity += quantity
            line = existing
        else:
            self.lines[line.key] = line
        self.save()
        return line

    def update_quantity(self, key, quantity):
        if key not in self.lines:
            raise KeyError(key)
        if quantity <= 0:
            self.remove(key)
            return None
        self.lines[key].quantity = quantity
        self.save()
        return self.lines[key]

    def remove(self, key):
        if key not in self.lines:
            raise KeyError(key)
        del self.lines[key]
        self.save()

    def clear(self):
        self.lines.clear()
        self.save()

    def total_price(self):
        return sum((line.subtotal for line in self.lines.values()), Decimal('0.00'))

    def total_items(self):
        return sum(line.quantity for line in self.lines.values())

    def lines_by_merchant(self):
        grouped = OrderedDict()
        for line in self.lines.values():
            grouped.setdefault(line.merchant_id, []).append(line)
        return grouped

    def stock_lines(self):
        """Quantities per menu item in the shape decrement_menu_item_stock expects"""
        return [{'id': line.item.pk, 'quantity': line.quantity} for line in self.lines.values()]
