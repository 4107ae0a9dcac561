"""Discount model - amount-off or percent-off rules applied to carts."""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, CheckConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func
from discounts.database import Base, BigIntId
from discounts.services.adjustments import AppliesTo, AmountOff, PercentOff
from discounts.utils.dates import to_utc, utc_now


class Discount(Base):
    """
    Discount rule.

    Either ``amount`` (minor currency units) or ``percent`` is set, never
    both. ``max_usage`` caps how many cart items a single calculation
    may apply the discount to. Auto-apply discounts are considered for
    every cart without being attached explicitly.
    """

    __tablename__ = 'discount'
    __table_args__ = (
        CheckConstraint('amount >= 0', name='ck_discount_amount_positive'),
        CheckConstraint('percent >= 0 AND percent <= 100', name='ck_discount_percent_range'),
        CheckConstraint('(amount > 0 AND percent = 0) OR (amount = 0 AND percent > 0)', name='ck_discount_amount_xor_percent'),
        CheckConstraint('max_usage >= 1', name='ck_discount_max_usage'),
    )

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    code = Column(String(50), nullable=False, unique=True)
    name = Column(String(200), nullable=True)
    amount = Column(Integer, nullable=False, default=0)  # cents
    percent = Column(Integer, nullable=False, default=0)
    applies_to = Column(
        SQLEnum(AppliesTo, name='discount_applies_to', native_enum=False, length=20),
        nullable=False,
        default=AppliesTo.ORDER
    )
    max_usage = Column(Integer, nullable=False, default=1)
    auto_apply = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    cart_discounts = relationship('CartDiscount', back_populates='discount', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Discount(id={self.id}, code='{self.code}', amount={self.amount}, percent={self.percent})>"

    @property
    def is_amount_off(self):
        return (self.amount or 0) > 0

    @validates('expires_at')
    def _normalize_expires_at(self, key, value):
        return to_utc(value)

    def is_expired(self, now=None):
        """Check if the discount has expired (calculated, not stored)."""
        if self.expires_at is None:
            return False
        return to_utc(self.expires_at) <= to_utc(now or utc_now())

    def to_adjustment(self):
        """Convert the record into an AmountOff or PercentOff adjustment."""
        max_usage = self.max_usage or 1
        if self.is_amount_off:
            return AmountOff(self.amount, self.applies_to or AppliesTo.ORDER, max_usage=max_usage, code=self.code)
        return PercentOff(self.percent, max_usage=max_usage, code=self.code)
