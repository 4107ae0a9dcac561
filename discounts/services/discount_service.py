"""Discount provider - discounts active for a cart (attached or auto-applied)."""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from discounts.models import Discount, CartDiscount
from discounts.exceptions import NotFoundError
from discounts.utils.dates import to_utc, utc_now

logger = logging.getLogger(__name__)


def _not_expired(now: datetime):
    now = to_utc(now)
    return or_(Discount.expires_at.is_(None), Discount.expires_at > now)


def get_discount(session: Session, discount_id: int) -> Discount:
    """Get discount by id or raise NotFoundError."""
    discount = session.query(Discount).filter(Discount.id == discount_id).first()
    if not discount:
        raise NotFoundError('Descuento no encontrado.')
    return discount


def get_discounts_for_cart(
    session: Session,
    cart_id: int,
    include_auto_apply: bool = True,
    now: Optional[datetime] = None
) -> List[Discount]:
    """
    Get the discounts active for a cart.

    Attached discounts come first, in the order they were attached, followed
    by auto-apply discounts not already attached. Expired discounts are
    excluded from both.
    """
    now = now or utc_now()

    attached = session.query(Discount).join(
        CartDiscount, CartDiscount.discount_id == Discount.id
    ).filter(
        CartDiscount.cart_id == cart_id,
        _not_expired(now)
    ).order_by(CartDiscount.id).all()

    discounts = list(attached)
    if include_auto_apply:
        seen = {d.id for d in discounts}
        auto = session.query(Discount).filter(
            Discount.auto_apply == True,  # noqa: E712
            _not_expired(now)
        ).order_by(Discount.id).all()
        discounts.extend(d for d in auto if d.id not in seen)

    logger.debug(f"[DISCOUNTS] cart={cart_id} active discounts: {[d.code for d in discounts]}")
    return discounts


def apply_to_cart(session: Session, discount: Discount, cart_id: int) -> CartDiscount:
    """Attach discount to cart. Attaching twice returns the existing link."""
    link = session.query(CartDiscount).filter(
        CartDiscount.cart_id == cart_id,
        CartDiscount.discount_id == discount.id
    ).first()

    if not link:
        link = CartDiscount(cart_id=cart_id, discount_id=discount.id)
        session.add(link)
        # Caller owns the transaction
        session.flush()
        logger.info(f"[DISCOUNTS] Attached {discount.code} to cart {cart_id}")

    return link


def remove_from_cart(session: Session, discount: Discount, cart_id: int) -> None:
    """Detach discount from cart."""
    deleted = session.query(CartDiscount).filter(
        CartDiscount.cart_id == cart_id,
        CartDiscount.discount_id == discount.id
    ).delete()
    if deleted:
        session.flush()
        logger.info(f"[DISCOUNTS] Removed {discount.code} from cart {cart_id}")
