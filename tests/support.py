"""Builders shared by the storefront test suites."""

from protean import current_domain

from storefront.catalogue.management import CreateCategory, CreateProduct
from storefront.catalogue.product import Product
from storefront.ordering.cart.items import AddToCart

CUSTOMER = {"X-User-Id": "cust-001"}
OTHER_CUSTOMER = {"X-User-Id": "cust-002"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin"}


def create_category(name="Electronics", **overrides):
    return current_domain.process(CreateCategory(name=name, **overrides), asynchronous=False)


def create_product(name="Keyboard", price_cents=5000, stock=10, **overrides):
    return current_domain.process(
        CreateProduct(name=name, price_cents=price_cents, stock=stock, **overrides),
        asynchronous=False,
    )


def add_to_cart(product_id, quantity=1, customer_id="cust-001"):
    return current_domain.process(
        AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


def stock_of(product_id):
    return current_domain.repository_for(Product).get(product_id).stock
