"""Shared BDD fixtures and step definitions for checkout."""

import asyncio
from decimal import Decimal

import pytest
from checkout.cart.reader import InMemoryCartReader
from checkout.session.entry import enter_checkout
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def outcome():
    """Mutable holder for the latest placement outcome."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a signed-in shopper with a cart from "{shop_name}" worth {amount:d}'),
    target_fixture="cart_reader",
)
def _cart_worth(make_line, shop_name, amount):
    return InMemoryCartReader(
        {"cust-001": [make_line(item_id="ci-1", shop_id="shop-1", shop_name=shop_name, price=float(amount))]}
    )


@given("the shopper enters checkout", target_fixture="checkout_session")
def _enter_checkout(shopper, cart_reader, order_api, widget_factory, address_book, config):
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


@given(parsers.cfparse('the shopper ships to "{address_id}"'))
def _ships_to(checkout_session, address_id):
    checkout_session.select_shipping_address(address_id)


@given(parsers.cfparse('the shopper pays with "{method}"'))
@when(parsers.cfparse('the shopper pays with "{method}"'))
def _pays_with(checkout_session, method):
    checkout_session.select_payment_method(method)


@given("the shopper reaches review")
def _reaches_review(checkout_session):
    checkout_session.advance()
    checkout_session.advance()


@given(parsers.cfparse('the gateway will decline with "{description}"'))
def _gateway_declines(widget_factory, description):
    widget_factory.configure(outcome="failure", failure_description=description)


@given("the gateway returns a tampered signature")
def _gateway_tampers(widget_factory):
    widget_factory.configure(tamper_signature=True)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the shopper continues")
def _continues(checkout_session):
    checkout_session.advance()


@when("the shopper goes back")
def _goes_back(checkout_session):
    checkout_session.go_back()


@when(parsers.cfparse('the shopper applies coupon "{code}" for "{seller_id}"'))
def _applies_coupon(checkout_session, code, seller_id):
    checkout_session.apply_coupon(seller_id, code)


@when("the shopper places the order")
def _places_order(checkout_session, outcome):
    outcome["result"] = asyncio.run(checkout_session.place_order())


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the checkout step is "{step}"'))
def _step_is(checkout_session, step):
    assert checkout_session.state.step.value == step


@then(parsers.cfparse('the "{field}" field reports "{message}"'))
def _field_reports(checkout_session, field, message):
    assert checkout_session.state.validation_errors[field] == message


@then(parsers.cfparse("the grand total is {amount}"))
def _grand_total(checkout_session, amount):
    assert checkout_session.totals.grand_total == Decimal(amount)


@then(parsers.cfparse('the checkout error is "{message}"'))
def _error_is(checkout_session, message):
    assert checkout_session.state.error == message
    assert checkout_session.state.processing is False


@then("the shopper is sent to the single-order confirmation")
def _single_order_confirmation(outcome):
    result = outcome["result"]
    assert result.succeeded
    assert result.route == f"/user/orders/{result.placed.order_ids[0]}?success=true&multi=false"


@then("no confirmation route is produced")
def _no_confirmation(outcome):
    assert outcome["result"].route is None
