"""CartDiscount model - attaches discounts to externally stored carts."""
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from discounts.database import Base, BigIntId


class CartDiscount(Base):
    """Link between a cart id and a discount applied to it."""

    __tablename__ = 'cart_discount'
    __table_args__ = (
        UniqueConstraint('cart_id', 'discount_id', name='uq_cart_discount'),
    )

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    cart_id = Column(BigInteger, nullable=False, index=True)  # carts live outside this service
    discount_id = Column(BigInteger, ForeignKey('discount.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    discount = relationship('Discount', back_populates='cart_discounts')

    def __repr__(self):
        return f"<CartDiscount(cart_id={self.cart_id}, discount_id={self.discount_id})>"
