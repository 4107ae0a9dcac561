"""
Discount adjustment service.
Allocates discount amounts to cart items in place.
"""
import logging
from typing import Iterable, List, Optional, Union
from datetime import datetime
from sqlalchemy.orm import Session
from discounts.services.adjustments import AppliesTo, AmountOff, PercentOff
from discounts.services.cart_service import Cart, CartItem
from discounts.services.discount_service import get_discounts_for_cart

logger = logging.getLogger(__name__)

Adjustment = Union[AmountOff, PercentOff]


def calculate_adjustments(cart: Cart, discounts: Iterable) -> None:
    """
    Apply discounts to the items of a cart, mutating each item's amount_each.

    Amount-off discounts are applied before percent-off ones so percentages
    work on what remains after fixed deductions. Each discount goes to at
    most ``max_usage`` items, picking the items with the highest current
    discounted amount. Running it twice on the same cart applies everything
    twice.
    """
    for adjustment in sort_adjustments(_to_adjustment(d) for d in discounts):
        # Re-sort per discount: earlier discounts change the ordering
        items = sorted(cart.items, key=lambda item: item.amount_each.discounted_amount, reverse=True)
        for item in items[:adjustment.max_usage]:
            delta = calculate_item_discount(item, adjustment)
            item.amount_each = item.amount_each.add_discounts(delta)
            logger.debug(f"[DISCOUNTS] cart={cart.cart_id} item={item.item_id} {adjustment!r} delta={delta}")


def calculate_cart_adjustments(
    session: Session,
    cart: Cart,
    include_auto_apply: bool = True,
    now: Optional[datetime] = None
) -> List:
    """Load the discounts active for the cart and apply them. Returns the discounts used."""
    discounts = get_discounts_for_cart(session, cart.cart_id, include_auto_apply=include_auto_apply, now=now)
    calculate_adjustments(cart, discounts)

    total = cart.item_amount_total
    logger.info(
        f"[DISCOUNTS] cart={cart.cart_id} discounts={len(discounts)} "
        f"base={total.base} discounts_total={total.discounts} discounted={total.discounted_amount}"
    )
    return discounts


def sort_adjustments(adjustments: Iterable[Adjustment]) -> List[Adjustment]:
    """Stable partition: every amount-off before every percent-off."""
    return sorted(adjustments, key=lambda adjustment: 0 if adjustment.is_amount_off else 1)


def calculate_item_discount(item: CartItem, adjustment: Adjustment) -> int:
    """Per-unit discount an adjustment gives a single cart item."""
    assert item.quantity >= 1, f'Cart item {item.item_id} has quantity {item.quantity}'

    if isinstance(adjustment, PercentOff):
        return item.amount_each.discounted_amount * adjustment.percent // 100

    if adjustment.applies_to == AppliesTo.ORDER:
        return adjustment.amount // item.quantity

    if adjustment.applies_to == AppliesTo.PARTICIPANT:
        participants = _get_participants(item.sellable)
        if participants is not None:
            return adjustment.amount * participants

    return 0


def _get_participants(sellable) -> Optional[int]:
    get_participants = getattr(sellable, 'get_participants', None)
    if get_participants is None:
        return None
    return get_participants()


def _to_adjustment(discount) -> Adjustment:
    if isinstance(discount, (AmountOff, PercentOff)):
        return discount
    return discount.to_adjustment()
