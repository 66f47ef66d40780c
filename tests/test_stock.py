"""tests/test_stock.py - inventory driven availability and stock decrement."""
import uuid

import pytest
from rest_framework.exceptions import ValidationError

from conftest import make_category, make_item, make_merchant
from inventory.models import MenuItem
from inventory.stock import InsufficientStock, decrement_menu_item_stock, ensure_stock, low_stock_items

pytestmark = pytest.mark.django_db


class TestAvailabilityRule:
    @pytest.mark.parametrize("stock, threshold, expected", [
        (10, 2, True),
        (3, 2, True),
        (2, 2, False),
        (1, 2, False),
        (0, 0, False),
        (1, 0, True),
    ])
    def test_tracked_items_follow_stock(self, merchant, category, stock, threshold, expected):
        item = make_item(
            merchant, category, track_inventory=True, stock_quantity=stock,
            low_stock_threshold=threshold, available=not expected,
        )
        item.refresh_from_db()
        assert item.available is expected

    def test_untracked_items_keep_manual_flag(self, merchant, category):
        item = make_item(merchant, category, track_inventory=False, stock_quantity=0, available=True)
        item.refresh_from_db()
        assert item.available is True

        item.available = False
        item.save()
        item.refresh_from_db()
        assert item.available is False

    def test_tracked_without_quantity_keeps_manual_flag(self, merchant, category):
        item = make_item(merchant, category, track_inventory=True, stock_quantity=None, available=False)
        item.refresh_from_db()
        assert item.available is False

    def test_restock_makes_item_available_again(self, merchant, category):
        item = make_item(merchant, category, track_inventory=True, stock_quantity=0)
        assert item.available is False

        item.stock_quantity = 5
        item.save(update_fields=["stock_quantity"])
        item.refresh_from_db()
        assert item.available is True

    def test_raising_threshold_hides_item(self, merchant, category):
        item = make_item(merchant, category, track_inventory=True, stock_quantity=5, low_stock_threshold=2)
        assert item.available is True

        item.low_stock_threshold = 5
        item.save(update_fields=["low_stock_threshold"])
        item.refresh_from_db()
        assert item.available is False

    def test_lowering_threshold_shows_item(self, merchant, category):
        item = make_item(merchant, category, track_inventory=True, stock_quantity=5, low_stock_threshold=5)
        assert item.available is False

        item.low_stock_threshold = 0
        item.save(update_fields=["low_stock_threshold"])
        item.refresh_from_db()
        assert item.available is True

    def test_turning_tracking_on_applies_stock(self, merchant, category):
        item = make_item(merchant, category, track_inventory=False, stock_quantity=0, available=True)

        item.track_inventory = True
        item.save(update_fields=["track_inventory"])
        item.refresh_from_db()
        assert item.available is False


class TestDecrement:
    def test_subtracts_and_floors_at_zero(self, merchant, category):
        item = make_item(merchant, category, track_inventory=True, stock_quantity=3)

        updated = decrement_menu_item_stock([{"id": item.pk, "quantity": 5}])

        item.refresh_from_db()
        assert [row.pk for row in updated] == [item.pk]
        assert item.stock_quantity == 0
        assert item.available is False

    def test_untracked_items_are_ignored(self, merchant, category):
        item = make_item(merchant, category, track_inventory=False, stock_quantity=7)

        assert decrement_menu_item_stock([{"id": str(item.pk), "quantity": 2}]) == []

        item.refresh_from_db()
        assert item.stock_quantity == 7

    def test_repeated_ids_are_summed(self, merchant, category):
        item = make_item(merchant, category, track_inventory=True, stock_quantity=10, low_stock_threshold=2)

        decrement_menu_item_stock([
            {"id": str(item.pk), "quantity": 3},
            {"id": str(item.pk).upper(), "quantity": 4},
        ])

        item.refresh_from_db()
        assert item.stock_quantity == 3
        assert item.available is True

    def test_unknown_ids_are_skipped(self, merchant, category):
        assert decrement_menu_item_stock([{"id": str(uuid.uuid4()), "quantity": 1}]) == []

    def test_invalid_id_is_rejected(self):
        with pytest.raises(ValidationError):
            decrement_menu_item_stock([{"id": "not-a-uuid", "quantity": 1}])


class TestEnsureStock:
    def test_insufficient_stock_raises(self, merchant, category):
        item = make_item(merchant, category, track_inventory=True, stock_quantity=2)
        with pytest.raises(InsufficientStock) as excinfo:
            ensure_stock([{"id": item.pk, "quantity": 3}])
        assert "Insufficient stock for Iced Latte" in str(excinfo.value.detail[0])

    def test_untracked_items_always_pass(self, merchant, category):
        item = make_item(merchant, category, track_inventory=False)
        ensure_stock([{"id": item.pk, "quantity": 999}])


class TestLowStock:
    def test_lists_tracked_items_at_or_below_threshold(self, merchant, category):
        low = make_item(merchant, category, name="Low", track_inventory=True, stock_quantity=2, low_stock_threshold=2)
        make_item(merchant, category, name="Plenty", track_inventory=True, stock_quantity=20, low_stock_threshold=2)
        make_item(merchant, category, name="Untracked", track_inventory=False, stock_quantity=0)

        assert list(low_stock_items()) == [low]

    def test_scoped_to_merchant(self, merchant, category):
        other = make_merchant(name="Other")
        other_category = make_category(other)
        make_item(other, other_category, track_inventory=True, stock_quantity=0)
        mine = make_item(merchant, category, track_inventory=True, stock_quantity=0)

        assert list(low_stock_items(merchant)) == [mine]
        assert MenuItem.objects.filter(track_inventory=True).count() == 2
