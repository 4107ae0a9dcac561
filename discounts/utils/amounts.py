"""Integer money arithmetic for discountable amounts (minor currency units)."""


class DiscountableValue:
    """
    Immutable pair of a base amount and the discounts applied against it.

    All values are integers in minor currency units (cents). The raw
    discount total may grow past the base; the exposed figures are
    clamped so the discounted amount never goes below zero.
    """

    __slots__ = ('_base', '_discounts')

    def __init__(self, base: int, discounts: int = 0):
        if base < 0:
            raise ValueError(f'Base amount cannot be negative: {base}')
        if discounts < 0:
            raise ValueError(f'Discounts cannot be negative: {discounts}')
        self._base = int(base)
        self._discounts = int(discounts)

    @property
    def base(self) -> int:
        return self._base

    @property
    def raw_discounts(self) -> int:
        """Discount total as accumulated, without clamping to the base."""
        return self._discounts

    @property
    def discounts(self) -> int:
        """Effective discount, capped at the base amount."""
        return min(self._discounts, self._base)

    @property
    def discounted_amount(self) -> int:
        return max(self._base - self._discounts, 0)

    def add_discounts(self, amount: int) -> 'DiscountableValue':
        """Return a new value with ``amount`` added to the discount total."""
        if amount < 0:
            raise ValueError(f'Discount increment cannot be negative: {amount}')
        return DiscountableValue(self._base, self._discounts + int(amount))

    def multiply(self, quantity: int) -> 'DiscountableValue':
        return DiscountableValue(self._base * quantity, self._discounts * quantity)

    def __add__(self, other):
        if not isinstance(other, DiscountableValue):
            return NotImplemented
        # Sum the capped discounts so one item's excess never reduces another item
        return DiscountableValue(self._base + other._base, self.discounts + other.discounts)

    def __eq__(self, other):
        if not isinstance(other, DiscountableValue):
            return NotImplemented
        return self._base == other._base and self._discounts == other._discounts

    def __hash__(self):
        return hash((self._base, self._discounts))

    def to_dict(self):
        return {
            'base': self.base,
            'discounts': self.discounts,
            'discounted_amount': self.discounted_amount,
        }

    def __repr__(self):
        return f"<DiscountableValue(base={self._base}, discounts={self._discounts})>"
