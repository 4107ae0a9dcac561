import pytest
import uuid

from discounts import create_app
from discounts import database
from discounts.models import Discount, AppliesTo
from discounts.services.cart_service import Cart, CartItem, Sellable, Booking


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    return create_app('config.TestConfig')


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def runner(app):
    """Create CLI runner."""
    return app.test_cli_runner()


@pytest.fixture(scope='function')
def session(app):
    """Create database session with fresh tables for each test."""
    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    session = database.get_session()
    yield session
    session.rollback()
    database.db_session.remove()


@pytest.fixture
def make_discount(session):
    """Factory for persisted discounts."""
    def _make_discount(amount=0, percent=0, applies_to=AppliesTo.ORDER, max_usage=1,
                       auto_apply=False, expires_at=None, code=None):
        discount = Discount(
            code=code or f'CODE-{str(uuid.uuid4())[:8]}',
            amount=amount,
            percent=percent,
            applies_to=applies_to,
            max_usage=max_usage,
            auto_apply=auto_apply,
            expires_at=expires_at
        )
        session.add(discount)
        session.commit()
        return discount
    return _make_discount


@pytest.fixture
def make_cart():
    """Factory for in-memory carts: make_cart([(amount, qty), ...], participants=None)."""
    def _make_cart(items, cart_id=1, participants=None):
        if participants is None:
            sellable = Sellable('sellable-1', 'Test Sellable')
        else:
            sellable = Booking('sellable-1', 'Test Booking', participants=participants)
        cart = Cart(cart_id)
        for idx, (amount, quantity) in enumerate(items):
            cart.add_item(CartItem(f'item-{idx}', sellable, amount, quantity))
        return cart
    return _make_cart
