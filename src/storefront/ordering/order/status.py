"""Order status updates and the transition policies that guard them.

Status changes are accepted unconditionally by default (``allow_any``), so an
administrator can, for example, move a completed order back to pending.
Set ``STOREFRONT_STATUS_POLICY=forward_only`` to only allow the forward
lifecycle in ``FORWARD_TRANSITIONS``.
"""

import os

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import FORWARD_TRANSITIONS, Order, parse_status

logger = structlog.get_logger(__name__)

DEFAULT_POLICY = "allow_any"


def allow_any(current, target):  # noqa: ARG001
    return True


def forward_only(current, target):
    return current == target or target in FORWARD_TRANSITIONS.get(current, set())


TRANSITION_POLICIES = {
    "allow_any": allow_any,
    "forward_only": forward_only,
}


def transition_policy():
    """Return the policy selected by ``STOREFRONT_STATUS_POLICY``."""
    name = os.getenv("STOREFRONT_STATUS_POLICY", DEFAULT_POLICY)
    policy = TRANSITION_POLICIES.get(name)
    if policy is None:
        logger.warning("Unknown status policy, falling back to default", policy=name, default=DEFAULT_POLICY)
        policy = TRANSITION_POLICIES[DEFAULT_POLICY]
    return policy


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        # Reject unknown values before touching the order
        target = parse_status(command.status)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.change_status(target, policy=transition_policy())
        repo.add(order)

        logger.info("Order status updated", order_id=str(order.id), status=order.status)
        return str(order.id)
