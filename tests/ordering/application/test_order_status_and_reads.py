"""Application tests for order status updates and scoped order reads."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.identity.access import VisibilityScope
from storefront.ordering.checkout.saga import checkout
from storefront.ordering.order.order import Order
from storefront.ordering.order.queries import get_order, list_orders, serialize_order
from storefront.ordering.order.status import (
    UpdateOrderStatus,
    allow_any,
    forward_only,
    transition_policy,
)
from storefront.shared.errors import NotFound
from support import add_to_cart, create_product


def _place_order(customer_id="cust-001", **product):
    add_to_cart(create_product(**product), quantity=1, customer_id=customer_id)
    return checkout(customer_id)


def _update_status(order_id, status):
    return current_domain.process(UpdateOrderStatus(order_id=order_id, status=status), asynchronous=False)


class TestUpdateOrderStatus:
    def test_status_changes(self):
        order = _place_order()
        _update_status(order.id, "processing")

        updated = current_domain.repository_for(Order).get(order.id)
        assert updated.status == "processing"
        assert updated.updated_at >= order.updated_at

    def test_invalid_status(self):
        order = _place_order()
        with pytest.raises(ValidationError):
            _update_status(order.id, "shipped")
        assert current_domain.repository_for(Order).get(order.id).status == "pending"

    def test_backward_move_allowed_by_default(self, monkeypatch):
        monkeypatch.delenv("STOREFRONT_STATUS_POLICY", raising=False)
        order = _place_order()
        _update_status(order.id, "completed")
        _update_status(order.id, "pending")
        assert current_domain.repository_for(Order).get(order.id).status == "pending"

    def test_forward_only_policy(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_STATUS_POLICY", "forward_only")
        order = _place_order()
        _update_status(order.id, "processing")
        _update_status(order.id, "completed")

        with pytest.raises(ValidationError):
            _update_status(order.id, "pending")


class TestTransitionPolicy:
    def test_default_is_allow_any(self, monkeypatch):
        monkeypatch.delenv("STOREFRONT_STATUS_POLICY", raising=False)
        assert transition_policy() is allow_any

    def test_forward_only_selected(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_STATUS_POLICY", "forward_only")
        assert transition_policy() is forward_only

    def test_unknown_policy_falls_back(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_STATUS_POLICY", "anything-goes")
        assert transition_policy() is allow_any


class TestScopedReads:
    def test_owner_can_read(self):
        order = _place_order("cust-001")
        assert get_order(order.id, VisibilityScope.own("cust-001")).id == order.id

    def test_other_customer_gets_not_found(self):
        order = _place_order("cust-002")
        with pytest.raises(NotFound) as exc:
            get_order(order.id, VisibilityScope.own("cust-001"))
        assert exc.value.message == "Order not found"

    def test_admin_reads_any_order(self):
        order = _place_order("cust-002")
        assert get_order(order.id, VisibilityScope.all()).id == order.id

    def test_missing_order(self):
        with pytest.raises(NotFound):
            get_order("missing", VisibilityScope.all())

    def test_list_is_scoped(self):
        _place_order("cust-001", name="A")
        _place_order("cust-002", name="B")

        assert len(list_orders(VisibilityScope.own("cust-001"))) == 1
        assert len(list_orders(VisibilityScope.all())) == 2

    def test_list_newest_first(self):
        first = _place_order("cust-001", name="A")
        second = _place_order("cust-001", name="B")

        assert [o.id for o in list_orders(VisibilityScope.own("cust-001"))] == [second.id, first.id]

    def test_serialized_order_carries_product_summaries(self):
        order = _place_order("cust-001", name="Lamp", price_cents=4550)

        data = serialize_order(get_order(order.id, VisibilityScope.all()))

        assert data["totalAmount"] == "45.50"
        assert data["orderItems"][0]["priceAtPurchase"] == "45.50"
        assert data["orderItems"][0]["product"]["name"] == "Lamp"


class TestLargeOrderHistory:
    def _add_orders(self, count, customer_id):
        repo = current_domain.repository_for(Order)
        line = {"product_id": "prod-001", "quantity": 1, "price_at_purchase_cents": 100}
        for _ in range(count):
            repo.add(Order.place(customer_id, [line], 100))

    def test_customer_sees_every_order(self):
        self._add_orders(105, "cust-001")

        orders = list_orders(VisibilityScope.own("cust-001"))

        assert len(orders) == 105
        created = [order.created_at for order in orders]
        assert created == sorted(created, reverse=True)

    def test_admin_sees_every_order(self):
        self._add_orders(105, "cust-001")
        self._add_orders(3, "cust-002")

        assert len(list_orders(VisibilityScope.all())) == 108
