"""BDD tests for checkout."""

from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when

from storefront.ordering.cart.cart import Cart
from storefront.ordering.checkout.saga import checkout
from storefront.shared.errors import InsufficientStock
from storefront.shared.money import to_cents
from support import add_to_cart

scenarios("features/checkout.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the customer checks out")
def _(customer_id, outcome):
    try:
        outcome["order"] = checkout(customer_id)
    except ValidationError as exc:
        outcome["exc"] = exc


@when(parsers.cfparse('the customer adds {quantity:d} "{name}" to the cart'))
def _(products, customer_id, quantity, name):
    add_to_cart(products[name], quantity=quantity, customer_id=customer_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("an order is placed with total {total}"))
def _(outcome, total):
    assert outcome["exc"] is None
    assert outcome["order"].total_amount_cents == to_cents(total)


@then("the order is pending")
def _(outcome):
    assert outcome["order"].status == "pending"


@then(parsers.cfparse('the checkout fails with insufficient stock for "{name}"'))
def _(outcome, products, name):
    assert isinstance(outcome["exc"], InsufficientStock)
    assert outcome["exc"].product_id == products[name]


@then(parsers.cfparse('the "{name}" line has quantity {quantity:d}'))
def _(products, customer_id, name, quantity):
    cart = current_domain.repository_for(Cart).for_customer(customer_id)
    assert cart.line_for_product(products[name]).quantity == quantity
