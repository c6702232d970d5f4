"""Commands for placing an order and for discarding one during checkout rollback."""

import json

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_id, quantity, price_at_purchase_cents}
    total_amount_cents = Integer(required=True, min_value=0)


@storefront.command(part_of="Order")
class DiscardOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class OrderPlacementHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines_data = json.loads(command.lines) if isinstance(command.lines, str) else command.lines

        order = Order.place(
            customer_id=command.customer_id,
            lines_data=lines_data,
            total_amount_cents=command.total_amount_cents,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)

    @handle(DiscardOrder)
    def discard_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.discard()
        repo.add(order)
        repo._dao.delete(order)
