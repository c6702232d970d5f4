"""Application tests for the checkout saga, including its compensations."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.catalogue.management import DeleteProduct, UpdateProduct
from storefront.ordering.cart.cart import Cart
from storefront.ordering.checkout.saga import CheckoutSaga, checkout
from storefront.ordering.order.order import Order
from storefront.shared.errors import EmptyCart, InsufficientStock, OrderCreationFailed
from support import add_to_cart, create_product, stock_of


def _orders():
    return current_domain.repository_for(Order)._dao.query.all().items


def _cart_lines(customer_id="cust-001"):
    cart = current_domain.repository_for(Cart).for_customer(customer_id)
    return list(cart.lines) if cart else []


class TestSuccessfulCheckout:
    def test_total_is_exact(self):
        add_to_cart(create_product(name="A", price_cents=5000), quantity=2)
        add_to_cart(create_product(name="B", price_cents=10000), quantity=1)

        order = checkout("cust-001")

        assert order.total_amount_cents == 20000
        assert order.total_amount_cents == sum(
            line.quantity * line.price_at_purchase_cents for line in order.lines
        )

    def test_order_is_pending_with_one_line_per_cart_line(self):
        add_to_cart(create_product(name="A"), quantity=1)
        add_to_cart(create_product(name="B"), quantity=3)

        order = checkout("cust-001")

        assert order.status == "pending"
        assert sorted(line.quantity for line in order.lines) == [1, 3]

    def test_stock_decremented_and_cart_emptied(self):
        first = create_product(name="A", stock=5)
        second = create_product(name="B", stock=4)
        add_to_cart(first, quantity=2)
        add_to_cart(second, quantity=4)

        checkout("cust-001")

        assert stock_of(first) == 3
        assert stock_of(second) == 0
        assert _cart_lines() == []

    def test_price_snapshot_wins_over_current_price(self):
        product_id = create_product(price_cents=10000)
        add_to_cart(product_id)
        current_domain.process(UpdateProduct(product_id=product_id, price_cents=99999), asynchronous=False)

        order = checkout("cust-001")

        assert order.total_amount_cents == 10000
        assert order.lines[0].price_at_purchase_cents == 10000


class TestRejectedCheckout:
    def test_empty_cart(self):
        with pytest.raises(EmptyCart):
            checkout("cust-001")
        assert _orders() == []

    def test_cart_emptied_earlier(self):
        product_id = create_product()
        add_to_cart(product_id)
        checkout("cust-001")

        with pytest.raises(EmptyCart):
            checkout("cust-001")
        assert len(_orders()) == 1

    def test_insufficient_stock_changes_nothing(self):
        product_id = create_product(stock=5)
        add_to_cart(product_id, quantity=4)
        current_domain.process(UpdateProduct(product_id=product_id, stock=2), asynchronous=False)

        with pytest.raises(InsufficientStock) as exc:
            checkout("cust-001")

        assert exc.value.message == f"Insufficient stock for product {product_id}"
        assert stock_of(product_id) == 2
        assert len(_cart_lines()) == 1
        assert _orders() == []

    def test_deleted_product_is_insufficient_stock(self):
        product_id = create_product()
        add_to_cart(product_id)
        current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)

        with pytest.raises(InsufficientStock):
            checkout("cust-001")
        assert _orders() == []


class TestCompensation:
    def test_failure_placing_order_leaves_everything_untouched(self, monkeypatch):
        product_id = create_product(stock=5)
        add_to_cart(product_id, quantity=2)

        def broken_place(cls, *args, **kwargs):
            raise RuntimeError("order store unavailable")

        monkeypatch.setattr(Order, "place", classmethod(broken_place))

        with pytest.raises(OrderCreationFailed):
            checkout("cust-001")

        assert _orders() == []
        assert stock_of(product_id) == 5
        assert [line.quantity for line in _cart_lines()] == [2]

    def test_rejected_order_is_reraised_untouched(self, monkeypatch):
        product_id = create_product(stock=5)
        add_to_cart(product_id, quantity=2)

        def rejecting_place(cls, *args, **kwargs):
            raise ValidationError({"total_amount_cents": ["Total does not match order lines"]})

        monkeypatch.setattr(Order, "place", classmethod(rejecting_place))

        with pytest.raises(ValidationError):
            checkout("cust-001")

        assert _orders() == []
        assert stock_of(product_id) == 5
        assert len(_cart_lines()) == 1

    def test_shortfall_during_withdrawal_rolls_back(self, monkeypatch):
        first = create_product(name="A", stock=5)
        second = create_product(name="B", stock=5)
        add_to_cart(first, quantity=2)
        add_to_cart(second, quantity=3)

        saga = CheckoutSaga("cust-001")
        # Another checkout drains the second product between validation and withdrawal
        original_place_order = saga._place_order

        def place_then_drain(lines):
            original_place_order(lines)
            current_domain.process(UpdateProduct(product_id=second, stock=1), asynchronous=False)

        monkeypatch.setattr(saga, "_place_order", place_then_drain)

        with pytest.raises(InsufficientStock):
            saga.run()

        assert stock_of(first) == 5
        assert stock_of(second) == 1
        assert _orders() == []
        assert len(_cart_lines()) == 2

    def test_unexpected_failure_raises_order_creation_failed(self, monkeypatch):
        product_id = create_product(stock=5)
        add_to_cart(product_id, quantity=2)

        saga = CheckoutSaga("cust-001")

        def broken_clear():
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(saga, "_clear_cart", broken_clear)

        with pytest.raises(OrderCreationFailed):
            saga.run()

        assert stock_of(product_id) == 5
        assert _orders() == []
        assert len(_cart_lines()) == 1

    def test_failing_compensation_does_not_mask_error(self, monkeypatch):
        product_id = create_product(stock=5)
        add_to_cart(product_id, quantity=2)

        saga = CheckoutSaga("cust-001")

        def broken_clear():
            # Leave an undoable step on the stack
            saga._compensations.append(object())
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(saga, "_clear_cart", broken_clear)

        with pytest.raises(OrderCreationFailed):
            saga.run()

        assert stock_of(product_id) == 5
        assert _orders() == []
