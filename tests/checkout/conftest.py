import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _reset_adapters():
    """Every test starts from the default configuration and fresh fakes."""
    from checkout.config import reset_config
    from checkout.gateway import reset_widget_factory
    from checkout.placement import reset_order_api

    yield

    reset_config()
    reset_order_api()
    reset_widget_factory()


@pytest.fixture()
def config():
    from checkout.config import CheckoutConfig

    return CheckoutConfig()


@pytest.fixture()
def make_line():
    """Build a raw cart line; ``price`` × ``quantity`` becomes the line total."""

    def _make(item_id="ci-1", shop_id="shop-1", shop_name="Tryout Cards", price=1000.0, quantity=1, **extra):
        line = {
            "id": item_id,
            "product_id": f"prod-{item_id}",
            "product_name": f"Product {item_id}",
            "price": price,
            "quantity": quantity,
            "shop_id": shop_id,
            "shop_name": shop_name,
        }
        line.update(extra)
        return line

    return _make


@pytest.fixture()
def make_item(make_line):
    from checkout.cart.items import CartItem

    def _make(**kwargs):
        return CartItem.from_cart_line(make_line(**kwargs))

    return _make


@pytest.fixture()
def shopper():
    from checkout.shared.shopper import Shopper

    return Shopper(id="cust-001", email="asha@example.com", full_name="Asha Rao")


@pytest.fixture()
def address_book():
    from checkout.shared.address import Address, InMemoryAddressBook

    return InMemoryAddressBook(
        {
            "addr-home": Address(
                full_name="Asha Rao",
                phone="+919800000000",
                line1="12 MG Road",
                city="Bengaluru",
                state="Karnataka",
                postal_code="560001",
                country="India",
            ),
            "addr-office": Address(
                full_name="Asha Rao",
                line1="4th Floor, Tech Park",
                city="Bengaluru",
                postal_code="560103",
                country="India",
            ),
        }
    )


@pytest.fixture()
def order_api(config):
    from checkout.placement.fake_adapter import FakeOrderApi

    return FakeOrderApi(config)


@pytest.fixture()
def widget_factory(config):
    from checkout.gateway.fake_widget import FakeWidgetFactory

    return FakeWidgetFactory(config.gateway_secret)


@pytest.fixture()
def cart_reader(make_line):
    """One shopper with a single-seller cart worth ₹2000."""
    from checkout.cart.reader import InMemoryCartReader

    return InMemoryCartReader(
        {
            "cust-001": [
                make_line(item_id="ci-1", price=500.0, quantity=2),
                make_line(item_id="ci-2", price=1000.0, quantity=1),
            ]
        }
    )


@pytest.fixture()
def session(shopper, cart_reader, order_api, widget_factory, address_book, config):
    """A checkout session over the ₹2000 single-seller cart."""
    import asyncio

    from checkout.session.entry import enter_checkout

    entry = asyncio.run(
        enter_checkout(
            shopper,
            cart_reader,
            order_api=order_api,
            widget_factory=widget_factory,
            address_provider=address_book,
            config=config,
        )
    )
    return entry.session


@pytest.fixture()
def at_review(session):
    """The session moved to the review step with the home address selected."""
    session.select_shipping_address("addr-home")
    session.advance()
    session.advance()
    return session
