"""Checkout Saga — turns a customer's cart into an order.

Each step is a command processed synchronously in its own unit of work.
Steps that change state record a compensating command; when a later step
fails, the recorded compensations run in reverse order so that a failed
checkout leaves no order behind, stock untouched and the cart intact.

Flow:
    1. Load the cart → EmptyCart if it has no lines
    2. Check every line against current stock → InsufficientStock
    3. PlaceOrder (total from price snapshots)  ↩ DiscardOrder
    4. WithdrawStock for each line              ↩ RestockProduct
    5. ClearCart
"""

import json

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.queries import find_product
from storefront.catalogue.stock import RestockProduct, WithdrawStock
from storefront.ordering.cart.cart import Cart
from storefront.ordering.cart.items import ClearCart
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import DiscardOrder, PlaceOrder
from storefront.shared.errors import EmptyCart, InsufficientStock, OrderCreationFailed, error_message

logger = structlog.get_logger(__name__)


class CheckoutSaga:
    """Coordinates Ordering and Catalogue for a single checkout."""

    def __init__(self, customer_id):
        self.customer_id = str(customer_id)
        self.order_id = None
        self._compensations = []

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def _load_lines(self):
        cart = current_domain.repository_for(Cart).for_customer(self.customer_id)
        if cart is None or not cart.lines:
            raise EmptyCart()
        return [
            {
                "product_id": str(line.product_id),
                "quantity": line.quantity,
                "price_at_purchase_cents": line.price_at_addition_cents,
            }
            for line in cart.lines
        ]

    def _check_stock(self, lines):
        for line in lines:
            product = find_product(line["product_id"])
            if product is None or not product.has_stock_for(line["quantity"]):
                raise InsufficientStock(product_id=line["product_id"])

    def _place_order(self, lines):
        total = sum(line["quantity"] * line["price_at_purchase_cents"] for line in lines)
        self.order_id = current_domain.process(
            PlaceOrder(
                customer_id=self.customer_id,
                lines=json.dumps(lines),
                total_amount_cents=total,
            ),
            asynchronous=False,
        )
        self._compensations.append(DiscardOrder(order_id=self.order_id))
        logger.info("Order placed", order_id=self.order_id, customer_id=self.customer_id, total_cents=total)

    def _withdraw_stock(self, lines):
        for line in lines:
            current_domain.process(
                WithdrawStock(product_id=line["product_id"], quantity=line["quantity"]),
                asynchronous=False,
            )
            self._compensations.append(
                RestockProduct(product_id=line["product_id"], quantity=line["quantity"])
            )

    def _clear_cart(self):
        current_domain.process(ClearCart(customer_id=self.customer_id), asynchronous=False)

    # -------------------------------------------------------------------
    # Compensation
    # -------------------------------------------------------------------
    def _compensate(self):
        while self._compensations:
            command = self._compensations.pop()
            try:
                current_domain.process(command, asynchronous=False)
                logger.info("Compensation applied", command=command.__class__.__name__, order_id=self.order_id)
            except Exception as exc:
                # Keep going; the original failure is what the caller sees
                logger.error(
                    "Compensation failed",
                    command=command.__class__.__name__,
                    order_id=self.order_id,
                    error=str(exc),
                )

    # -------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------
    def run(self):
        """Execute the checkout and return the placed ``Order``."""
        logger.info("Checkout started", customer_id=self.customer_id)
        lines = self._load_lines()
        self._check_stock(lines)

        try:
            self._place_order(lines)
            self._withdraw_stock(lines)
            self._clear_cart()
        except ValidationError as exc:
            logger.warning(
                "Checkout rejected, rolling back",
                customer_id=self.customer_id,
                order_id=self.order_id,
                error=error_message(exc),
            )
            self._compensate()
            raise
        except Exception as exc:
            logger.error(
                "Checkout failed, rolling back",
                customer_id=self.customer_id,
                order_id=self.order_id,
                error=str(exc),
            )
            self._compensate()
            raise OrderCreationFailed() from exc

        logger.info("Checkout completed", order_id=self.order_id, customer_id=self.customer_id)
        return current_domain.repository_for(Order).get(self.order_id)


def checkout(customer_id):
    """Place an order from ``customer_id``'s cart."""
    return CheckoutSaga(customer_id).run()
