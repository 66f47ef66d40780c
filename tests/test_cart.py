"""tests/test_cart.py - session cart identity, quantities and totals."""
from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from conftest import make_category, make_item, make_merchant
from orders.cart import Cart, CartError, build_line_key

pytestmark = pytest.mark.django_db


def options(latte):
    size = latte.variation_groups.get(name="Size")
    return {
        "regular": size.variations.get(name="Regular"),
        "large": size.variations.get(name="Large"),
        "oat": latte.variations.get(name="Oat milk"),
        "shot": latte.add_ons.get(name="Extra shot"),
        "syrup": latte.add_ons.get(name="Vanilla syrup"),
        "size": size,
    }


class TestLineKey:
    def test_defaults(self):
        assert build_line_key("item") == "item-default-no-groups-none"

    def test_add_on_order_does_not_matter(self):
        first = build_line_key("item", "v1", {"g": "v2"}, [("b", 1), ("a", 2)])
        second = build_line_key("item", "v1", {"g": "v2"}, [("a", 2), ("b", 1)])
        assert first == second == "item-v1-g:v2-a-2,b-1"

    def test_group_order_does_not_matter(self):
        assert build_line_key("i", None, {"b": "2", "a": "1"}) == build_line_key("i", None, {"a": "1", "b": "2"})


class TestAdd:
    def test_same_configuration_increments_quantity(self, session, customizable_item):
        opt = options(customizable_item)
        cart = Cart(session)

        cart.add(customizable_item, 1, opt["oat"], [(opt["shot"], 1), (opt["syrup"], 1)], {opt["size"].pk: opt["large"]})
        cart.add(customizable_item, 2, opt["oat"], [(opt["syrup"], 1), (opt["shot"], 1)], {opt["size"].pk: opt["large"]})

        assert len(cart) == 1
        assert cart.total_items() == 3

    def test_different_variation_creates_new_line(self, session, customizable_item):
        opt = options(customizable_item)
        cart = Cart(session)

        cart.add(customizable_item, 1, selected_variations={opt["size"].pk: opt["regular"]})
        cart.add(customizable_item, 1, selected_variations={opt["size"].pk: opt["large"]})

        assert len(cart) == 2

    def test_different_add_ons_create_new_line(self, session, customizable_item):
        opt = options(customizable_item)
        cart = Cart(session)
        size = {opt["size"].pk: opt["regular"]}

        cart.add(customizable_item, 1, add_ons=[(opt["shot"], 1)], selected_variations=size)
        cart.add(customizable_item, 1, add_ons=[(opt["shot"], 2)], selected_variations=size)
        cart.add(customizable_item, 1, selected_variations=size)

        assert len(cart) == 3

    def test_unit_price_includes_options(self, session, customizable_item):
        opt = options(customizable_item)
        cart = Cart(session)

        line = cart.add(
            customizable_item, 2, opt["oat"], [(opt["shot"], 2)], {opt["size"].pk: opt["large"]},
        )
        # 150 + 20 (oat) + 25 (large) + 2 * 30 (shots)
        assert line.unit_price == Decimal("255.00")
        assert cart.total_price() == Decimal("510.00")

    def test_required_group_must_be_selected(self, session, customizable_item):
        with pytest.raises(CartError, match="choose a Size"):
            Cart(session).add(customizable_item, 1)

    def test_foreign_add_on_rejected(self, session, customizable_item, item):
        from inventory.models import AddOn

        stranger = AddOn.objects.create(menu_item=item, name="Pearls", price=Decimal("10.00"))
        opt = options(customizable_item)
        with pytest.raises(CartError):
            Cart(session).add(customizable_item, 1, add_ons=[(stranger, 1)], selected_variations={opt["size"].pk: opt["regular"]})

    def test_unavailable_item_rejected(self, session, item):
        item.available = False
        item.save()
        with pytest.raises(CartError, match="unavailable"):
            Cart(session).add(item, 1)

    def test_cart_error_is_a_validation_error(self):
        assert issubclass(CartError, ValidationError)


class TestUpdateAndRemove:
    def test_update_quantity(self, session, item):
        cart = Cart(session)
        line = cart.add(item, 1)
        cart.update_quantity(line.key, 4)
        assert cart.total_items() == 4

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_removes_line(self, session, item, quantity):
        cart = Cart(session)
        line = cart.add(item, 2)
        assert cart.update_quantity(line.key, quantity) is None
        assert len(cart) == 0

    def test_unknown_key(self, session):
        with pytest.raises(KeyError):
            Cart(session).remove("missing")

    def test_clear(self, session, item):
        cart = Cart(session)
        cart.add(item, 2)
        cart.clear()
        assert cart.total_items() == 0
        assert cart.total_price() == Decimal("0.00")


class TestPersistence:
    def test_cart_survives_reload_with_current_prices(self, session, item):
        Cart(session).add(item, 2)

        item.base_price = Decimal("100.00")
        item.save()

        reloaded = Cart(session)
        assert reloaded.total_items() == 2
        assert reloaded.total_price() == Decimal("200.00")

    def test_deleted_items_are_dropped(self, session, merchant, category):
        doomed = make_item(merchant, category, name="Seasonal")
        Cart(session).add(doomed, 1)
        doomed.delete()

        assert len(Cart(session)) == 0

    def test_unavailable_items_are_dropped(self, session, item):
        Cart(session).add(item, 1)
        item.available = False
        item.save()

        assert len(Cart(session)) == 0
        assert session["cart"] == []

    def test_items_of_inactive_merchants_are_dropped(self, session, merchant, item):
        other = make_merchant(name="Panaderia")
        bread = make_item(other, make_category(other, name="Bread"), name="Pandesal", base_price=Decimal("5.00"))
        cart = Cart(session)
        cart.add(item, 1)
        cart.add(bread, 3)

        other.active = False
        other.save()

        reloaded = Cart(session)
        assert [line.item for line in reloaded] == [item]

    def test_lines_grouped_by_merchant(self, session, item):
        other = make_merchant(name="Panaderia")
        bread = make_item(other, make_category(other, name="Bread"), name="Pandesal", base_price=Decimal("5.00"))

        cart = Cart(session)
        cart.add(item, 1)
        cart.add(bread, 10)

        grouped = Cart(session).lines_by_merchant()
        assert set(grouped) == {item.merchant_id, other.pk}
        assert grouped[other.pk][0].quantity == 10
