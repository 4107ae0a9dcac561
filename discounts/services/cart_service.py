"""In-memory cart used by the discount allocator.

Carts are not persisted here. Callers build one from their own storage
(or from a JSON payload) and save the mutated amounts afterwards.
"""

from typing import Any, Dict, List, Optional

from discounts.exceptions import InvalidCartError
from discounts.utils.amounts import DiscountableValue


class Sellable:
    """Something that can be purchased."""

    def __init__(self, sellable_id: Any, name: str = ''):
        self.sellable_id = sellable_id
        self.name = name

    def get_participants(self) -> Optional[int]:
        """Participant count, or None when the sellable has no participants."""
        return None

    def __repr__(self):
        return f"<Sellable(id={self.sellable_id!r}, name={self.name!r})>"


class Booking(Sellable):
    """A sellable reserved for a number of participants."""

    def __init__(self, sellable_id: Any, name: str = '', participants: int = 1):
        super().__init__(sellable_id, name)
        self.participants = participants

    def get_participants(self) -> Optional[int]:
        return self.participants

    def __repr__(self):
        return f"<Booking(id={self.sellable_id!r}, participants={self.participants})>"


class CartItem:
    """One line of a cart: a sellable at a quantity and per-unit amount."""

    def __init__(self, item_id: str, sellable: Sellable, amount: int, quantity: int = 1):
        self.item_id = item_id
        self.sellable = sellable
        self.quantity = quantity
        self.amount_each = DiscountableValue(amount)

    @property
    def amount_total(self) -> DiscountableValue:
        return self.amount_each.multiply(self.quantity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.item_id,
            'quantity': self.quantity,
            'participants': self.sellable.get_participants(),
            'amount_each': self.amount_each.to_dict(),
            'amount_total': self.amount_total.to_dict(),
        }

    def __repr__(self):
        return f"<CartItem(id={self.item_id!r}, quantity={self.quantity}, amount_each={self.amount_each!r})>"


class Cart:
    """Ordered collection of cart items."""

    def __init__(self, cart_id: Any, items: Optional[List[CartItem]] = None):
        self.cart_id = cart_id
        self.items = list(items or [])

    def add_item(self, item: CartItem) -> CartItem:
        self.items.append(item)
        return item

    def find_item(self, item_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.item_id == item_id), None)

    @property
    def item_amount_total(self) -> DiscountableValue:
        total = DiscountableValue(0)
        for item in self.items:
            total = total + item.amount_total
        return total

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cart_id': self.cart_id,
            'items': [item.to_dict() for item in self.items],
            'item_amount_total': self.item_amount_total.to_dict(),
        }

    def __repr__(self):
        return f"<Cart(id={self.cart_id!r}, items={len(self.items)})>"


def _parse_int(value: Any, field: str, minimum: int) -> int:
    """Parse a whole number field in minor units."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidCartError(f'El campo "{field}" debe ser un entero.', field=field)
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise InvalidCartError(f'El campo "{field}" debe ser un entero.', field=field)
    if parsed < minimum:
        raise InvalidCartError(f'El campo "{field}" debe ser mayor o igual a {minimum}.', field=field)
    return parsed


def build_cart_from_payload(cart_id: Any, data: Optional[Dict[str, Any]]) -> Cart:
    """
    Build a cart from a JSON payload.

    Expected shape::

        {"items": [{"id": "item-0", "amount": 2500, "quantity": 1,
                    "participants": 4, "sellable_id": 7, "name": "Escape room"}]}

    ``participants`` is optional; when present the sellable is a Booking.
    Raises InvalidCartError for malformed payloads.
    """
    if not isinstance(data, dict):
        raise InvalidCartError('El cuerpo de la solicitud debe ser un objeto JSON.')

    raw_items = data.get('items')
    if not isinstance(raw_items, list) or not raw_items:
        raise InvalidCartError('El carrito está vacío.', field='items')

    cart = Cart(cart_id)
    for idx, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise InvalidCartError(f'Item #{idx} inválido.', field='items')

        item_id = str(raw.get('id') or f'item-{idx}')
        if cart.find_item(item_id):
            raise InvalidCartError(f'Item duplicado: {item_id}', field='items')

        amount = _parse_int(raw.get('amount'), 'amount', 0)
        quantity = _parse_int(raw.get('quantity', 1), 'quantity', 1)

        sellable_id = raw.get('sellable_id', item_id)
        name = raw.get('name', '')
        if raw.get('participants') is not None:
            participants = _parse_int(raw['participants'], 'participants', 1)
            sellable = Booking(sellable_id, name, participants=participants)
        else:
            sellable = Sellable(sellable_id, name)

        cart.add_item(CartItem(item_id, sellable, amount, quantity))

    return cart
