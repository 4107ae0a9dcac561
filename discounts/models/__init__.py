"""Models package - exports all SQLAlchemy models."""
from discounts.models.discount import Discount, AppliesTo
from discounts.models.cart_discount import CartDiscount

__all__ = ['Discount', 'AppliesTo', 'CartDiscount']
