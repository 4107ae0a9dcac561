"""
Unit tests for the discount allocator.
"""

import pytest
from discounts.models import Discount, AppliesTo
from discounts.services.adjustments import AmountOff, PercentOff
from discounts.services.adjustment_service import (
    calculate_adjustments,
    calculate_item_discount,
    sort_adjustments,
)
from discounts.services.cart_service import Cart, CartItem, Sellable


class TestCalculateAdjustments:
    """Tests for calculate_adjustments."""

    def test_no_discounts(self, make_cart):
        cart = make_cart([(2500, 1)])

        calculate_adjustments(cart, [])

        assert cart.item_amount_total.discounts == 0
        assert cart.item_amount_total.discounted_amount == 2500

    def test_order_discount(self, make_cart):
        cart = make_cart([(2500, 1)])

        calculate_adjustments(cart, [AmountOff(1000, AppliesTo.ORDER)])

        item = cart.find_item('item-0')
        assert item.amount_each.discounts == 1000
        assert item.amount_each.discounted_amount == 1500

    def test_percent_discount(self, make_cart):
        cart = make_cart([(2500, 1)])

        calculate_adjustments(cart, [PercentOff(10)])

        assert cart.find_item('item-0').amount_each.discounts == 250
        assert cart.find_item('item-0').amount_each.discounted_amount == 2250

    def test_multiple_items_within_usage(self, make_cart):
        cart = make_cart([(2500, 1), (3500, 1)])

        calculate_adjustments(cart, [AmountOff(1000, AppliesTo.ORDER, max_usage=2)])

        assert cart.item_amount_total.discounts == 2000
        assert cart.item_amount_total.discounted_amount == 4000
        assert cart.find_item('item-0').amount_each.discounted_amount == 1500
        assert cart.find_item('item-1').amount_each.discounted_amount == 2500

    def test_limited_usage_hits_most_expensive_item(self, make_cart):
        cart = make_cart([(2000, 1), (3500, 1)])

        calculate_adjustments(cart, [PercentOff(50, max_usage=1)])

        assert cart.find_item('item-0').amount_each.discounts == 0
        assert cart.find_item('item-0').amount_each.discounted_amount == 2000
        assert cart.find_item('item-1').amount_each.discounts == 1750
        assert cart.find_item('item-1').amount_each.discounted_amount == 1750

    def test_usage_larger_than_item_count_applies_to_all(self, make_cart):
        cart = make_cart([(1000, 1), (2000, 1)])

        calculate_adjustments(cart, [AmountOff(100, max_usage=10)])

        assert cart.item_amount_total.discounts == 200

    def test_selection_is_reevaluated_per_discount(self, make_cart):
        cart = make_cart([(3000, 1), (2500, 1)])

        # First discount drops item-0 below item-1, so the second picks item-1
        calculate_adjustments(cart, [AmountOff(1000), AmountOff(100)])

        assert cart.find_item('item-0').amount_each.discounts == 1000
        assert cart.find_item('item-1').amount_each.discounts == 100

    def test_ties_keep_cart_order(self, make_cart):
        cart = make_cart([(1000, 1), (1000, 1)])

        calculate_adjustments(cart, [AmountOff(100)])

        assert cart.find_item('item-0').amount_each.discounts == 100
        assert cart.find_item('item-1').amount_each.discounts == 0

    def test_discount_is_capped(self, make_cart):
        cart = make_cart([(2500, 1)])

        calculate_adjustments(cart, [AmountOff(2000), AmountOff(2000)])

        item = cart.find_item('item-0')
        assert item.amount_each.discounts == 2500
        assert item.amount_each.discounted_amount == 0

    def test_amount_off_before_percent_off(self, make_cart):
        cart = make_cart([(2500, 1)])

        calculate_adjustments(cart, [PercentOff(50), AmountOff(1500)])

        item = cart.find_item('item-0')
        assert item.amount_each.discounts == 2000
        assert item.amount_each.discounted_amount == 500

    def test_multiple_percent_off_compound(self, make_cart):
        cart = make_cart([(2000, 1)])

        calculate_adjustments(cart, [PercentOff(50), PercentOff(50)])

        item = cart.find_item('item-0')
        assert item.amount_each.discounts == 1500
        assert item.amount_each.discounted_amount == 500

    def test_participant_discount(self, make_cart):
        cart = make_cart([(5500, 1)], participants=4)

        calculate_adjustments(cart, [AmountOff(1000, AppliesTo.PARTICIPANT)])

        item = cart.find_item('item-0')
        assert item.amount_each.discounts == 4000
        assert item.amount_each.discounted_amount == 1500

    def test_participant_discount_floored_at_base(self, make_cart):
        cart = make_cart([(2000, 1)], participants=4)

        calculate_adjustments(cart, [AmountOff(1000, AppliesTo.PARTICIPANT)])

        item = cart.find_item('item-0')
        assert item.amount_each.raw_discounts == 4000
        assert item.amount_each.discounts == 2000
        assert item.amount_each.discounted_amount == 0

    def test_order_and_participant_discounts(self, make_cart):
        cart = make_cart([(5500, 1)], participants=4)

        calculate_adjustments(cart, [
            AmountOff(1000, AppliesTo.ORDER),
            AmountOff(1000, AppliesTo.PARTICIPANT),
        ])

        item = cart.find_item('item-0')
        assert item.amount_each.discounts == 5000
        assert item.amount_each.discounted_amount == 500

    def test_participant_discount_without_participants_is_skipped(self, make_cart):
        cart = make_cart([(2500, 1)])

        calculate_adjustments(cart, [AmountOff(1000, AppliesTo.PARTICIPANT)])

        assert cart.item_amount_total.discounts == 0

    def test_accepts_discount_records(self, make_cart):
        cart = make_cart([(2500, 1)])
        discount = Discount(code='TESTCODE', amount=1000, percent=0,
                            applies_to=AppliesTo.ORDER, max_usage=1)

        calculate_adjustments(cart, [discount])

        assert cart.find_item('item-0').amount_each.discounted_amount == 1500


class TestCalculateItemDiscount:
    """Tests for the per-item delta."""

    def test_order_amount_divided_by_quantity_floors(self, make_cart):
        item = make_cart([(2500, 3)]).items[0]

        assert calculate_item_discount(item, AmountOff(1000, AppliesTo.ORDER)) == 333

    def test_percent_floors(self, make_cart):
        item = make_cart([(999, 1)]).items[0]

        assert calculate_item_discount(item, PercentOff(10)) == 99

    def test_percent_uses_current_discounted_amount(self, make_cart):
        item = make_cart([(2000, 1)]).items[0]
        item.amount_each = item.amount_each.add_discounts(1000)

        assert calculate_item_discount(item, PercentOff(50)) == 500

    def test_sellable_without_capability(self):
        class Plain:
            pass

        item = CartItem('item-0', Plain(), 2500, 1)

        assert calculate_item_discount(item, AmountOff(1000, AppliesTo.PARTICIPANT)) == 0

    def test_zero_quantity_is_a_programming_error(self):
        item = CartItem('item-0', Sellable(1), 2500, 0)

        with pytest.raises(AssertionError):
            calculate_item_discount(item, AmountOff(1000))


class TestSortAdjustments:
    """Tests for amount-off before percent-off ordering."""

    def test_stable_partition(self):
        p1, a1, p2, a2 = PercentOff(10), AmountOff(500), PercentOff(20), AmountOff(100)

        assert sort_adjustments([p1, a1, p2, a2]) == [a1, a2, p1, p2]


class TestAdjustmentVariants:
    """Tests for AmountOff / PercentOff construction."""

    def test_record_converts_to_variant(self):
        amount = Discount(code='A', amount=1000, percent=0, applies_to=AppliesTo.PARTICIPANT, max_usage=2)
        percent = Discount(code='P', amount=0, percent=25, applies_to=AppliesTo.ORDER, max_usage=1)

        amount_off = amount.to_adjustment()
        percent_off = percent.to_adjustment()

        assert isinstance(amount_off, AmountOff)
        assert amount_off.applies_to == AppliesTo.PARTICIPANT
        assert amount_off.max_usage == 2
        assert isinstance(percent_off, PercentOff)
        assert percent_off.percent == 25

    @pytest.mark.parametrize('factory', [
        lambda: AmountOff(0),
        lambda: AmountOff(100, max_usage=0),
        lambda: PercentOff(0),
        lambda: PercentOff(101),
    ])
    def test_invalid_variants_rejected(self, factory):
        with pytest.raises(ValueError):
            factory()
