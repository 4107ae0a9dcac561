"""Adjustment variants produced from discount records.

A discount is either a fixed amount off or a percentage off, never both.
Records are converted into one of these at load time so the allocator
can dispatch on the variant instead of inspecting zero-valued fields.
"""
import enum


class AppliesTo(enum.Enum):
    """Unit basis for a fixed-amount discount."""
    ORDER = "order"
    PARTICIPANT = "participant"


class AmountOff:
    """Fixed amount off, in minor currency units."""

    is_amount_off = True

    def __init__(self, amount: int, applies_to: AppliesTo = AppliesTo.ORDER, max_usage: int = 1, code: str = None):
        if amount <= 0:
            raise ValueError(f'Amount off must be positive: {amount}')
        if max_usage < 1:
            raise ValueError(f'max_usage must be at least 1: {max_usage}')
        self.amount = int(amount)
        self.applies_to = applies_to
        self.max_usage = int(max_usage)
        self.code = code

    def __repr__(self):
        return f"<AmountOff(amount={self.amount}, applies_to={self.applies_to.name}, max_usage={self.max_usage})>"


class PercentOff:
    """Percentage off the current discounted amount."""

    is_amount_off = False

    def __init__(self, percent: int, max_usage: int = 1, code: str = None):
        if not 0 < percent <= 100:
            raise ValueError(f'Percent off must be between 1 and 100: {percent}')
        if max_usage < 1:
            raise ValueError(f'max_usage must be at least 1: {max_usage}')
        self.percent = int(percent)
        self.max_usage = int(max_usage)
        self.code = code

    def __repr__(self):
        return f"<PercentOff(percent={self.percent}, max_usage={self.max_usage})>"
