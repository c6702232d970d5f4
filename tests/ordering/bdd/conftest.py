"""Shared BDD fixtures and step definitions for checkout."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from storefront.catalogue.management import UpdateProduct
from storefront.ordering.cart.cart import Cart
from storefront.ordering.order.order import Order
from storefront.shared.money import to_cents
from support import add_to_cart, create_product, stock_of


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer_id():
    return "cust-001"


@pytest.fixture()
def products():
    """Product ids keyed by name."""
    return {}


@pytest.fixture()
def outcome():
    """Container for the checkout result or the error it raised."""
    return {"order": None, "exc": None}


def _cart(customer_id):
    return current_domain.repository_for(Cart).for_customer(customer_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the catalogue has "{name}" priced {price} with {stock:d} in stock'))
def _(products, name, price, stock):
    products[name] = create_product(name=name, price_cents=to_cents(price), stock=stock)


@given(parsers.cfparse('the customer added {quantity:d} "{name}" to the cart'))
def _(products, customer_id, quantity, name):
    add_to_cart(products[name], quantity=quantity, customer_id=customer_id)


@given(parsers.cfparse('the price of "{name}" changes to {price}'))
def _(products, name, price):
    current_domain.process(UpdateProduct(product_id=products[name], price_cents=to_cents(price)), asynchronous=False)


@given(parsers.cfparse('the stock of "{name}" drops to {stock:d}'))
def _(products, name, stock):
    current_domain.process(UpdateProduct(product_id=products[name], stock=stock), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, name, stock):
    assert stock_of(products[name]) == stock


@then("no order exists")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().items == []


@then(parsers.cfparse("the cart holds {count:d} line"))
def _(customer_id, count):
    assert len(_cart(customer_id).lines) == count


@then("the cart is empty")
def _(customer_id):
    cart = _cart(customer_id)
    assert cart is None or len(cart.lines) == 0


@then(parsers.cfparse('the checkout fails with "{message}"'))
def _(outcome, message):
    assert isinstance(outcome["exc"], ValidationError)
    assert outcome["exc"].message == message
