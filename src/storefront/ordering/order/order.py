"""Order aggregate: an immutable record of what a customer bought.

An order is created once, from a cart snapshot, together with all of its
lines. After that only ``status`` (and ``updated_at``) may change.

Status model:
    pending → processing → completed
    pending | processing → cancelled
Whether other moves are accepted is decided by a transition policy (see
``storefront.ordering.order.status``).
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from storefront.domain import storefront
from storefront.ordering.order.events import OrderDiscarded, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Forward lifecycle; consulted by the ``forward_only`` policy
FORWARD_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def parse_status(value):
    """Return the ``OrderStatus`` for ``value`` or raise ``ValidationError``."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({"status": ["Invalid status"]}) from None


@storefront.entity(part_of="Order")
class OrderLine:
    """A purchased product, quantity and the price frozen when it was carted."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price_at_purchase_cents = Integer(required=True, min_value=0)

    @property
    def line_total_cents(self):
        return self.quantity * self.price_at_purchase_cents


@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    total_amount_cents = Integer(required=True, min_value=0)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    lines = HasMany(OrderLine)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, lines_data, total_amount_cents):
        """Create a pending order with every line in one step.

        Args:
            customer_id: The customer placing the order.
            lines_data: List of dicts with product_id, quantity,
                        price_at_purchase_cents.
            total_amount_cents: Total computed from the cart snapshot. Must
                        equal the sum of the lines.
        """
        if not lines_data:
            raise ValidationError({"lines": ["An order must contain at least one line"]})

        lines = [
            OrderLine(
                product_id=line["product_id"],
                quantity=line["quantity"],
                price_at_purchase_cents=line["price_at_purchase_cents"],
            )
            for line in lines_data
        ]
        computed_total = sum(line.line_total_cents for line in lines)
        if computed_total != total_amount_cents:
            raise ValidationError(
                {"total_amount": [f"Total {total_amount_cents} does not match line total {computed_total}"]}
            )

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            total_amount_cents=computed_total,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_lines(line)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                lines=json.dumps(
                    [
                        {
                            "product_id": str(line.product_id),
                            "quantity": line.quantity,
                            "price_at_purchase_cents": line.price_at_purchase_cents,
                        }
                        for line in lines
                    ]
                ),
                total_amount_cents=computed_total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def change_status(self, new_status, policy):
        """Move to ``new_status`` if ``policy(current, target)`` allows it."""
        target = parse_status(new_status)
        current = OrderStatus(self.status)
        if not policy(current, target):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Compensation
    # -------------------------------------------------------------------
    def discard(self):
        """Drop every line ahead of deleting the order during a checkout rollback."""
        for line in list(self.lines):
            self.remove_lines(line)

        self.raise_(
            OrderDiscarded(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                discarded_at=datetime.now(UTC),
            )
        )
