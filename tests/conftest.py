import pytest

from pos_console import create_app
from pos_console.services.cart_service import CartStore
from pos_console.services.checkout_service import CheckoutCoordinator

from tests.helpers import FakeBackofficeClient, make_entry


@pytest.fixture
def backoffice():
    """Fake back-office client."""
    return FakeBackofficeClient()


@pytest.fixture
def cart():
    """Empty cart store."""
    return CartStore()


@pytest.fixture
def entry():
    """Catalog entry with 3 units left at 100.00."""
    return make_entry()


@pytest.fixture
def coordinator(cart, backoffice):
    return CheckoutCoordinator(cart, backoffice, branch_id=1)


@pytest.fixture
def ready_cart(cart, entry):
    """Cart with 2 x 100.00, a customer and a warehouse selected."""
    cart.select_warehouse(1)
    cart.set_customer(7)
    cart.add_item(entry, 1)
    cart.add_item(entry, 1)
    return cart


@pytest.fixture
def app(backoffice):
    """Create application instance for testing."""
    app = create_app('config.TestingConfig', backoffice_client=backoffice)
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
