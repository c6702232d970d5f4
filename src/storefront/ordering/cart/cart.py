"""Cart aggregate — one per customer, holding priced lines until checkout.

Each line freezes the product's price when the product is first added
(``price_at_addition_cents``). Adding the same product again only raises the
quantity; the snapshot is never refreshed from the catalogue. Stock checks
here are advisory: they compare against the product row read by the caller
and reserve nothing.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.domain import storefront
from storefront.ordering.cart.events import (
    CartCleared,
    CartLineAdded,
    CartLineQuantityUpdated,
    CartLineRemoved,
)
from storefront.shared.errors import InsufficientStock, NotFound


@storefront.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price_at_addition_cents = Integer(required=True, min_value=0)
    added_at = DateTime()
    updated_at = DateTime()

    @property
    def line_total_cents(self):
        return self.quantity * self.price_at_addition_cents


@storefront.aggregate
class Cart:
    customer_id = Identifier(required=True)
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find_line(self, line_id):
        return next((line for line in self.lines if str(line.id) == str(line_id)), None)

    def line_for_product(self, product_id):
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    @property
    def total_cents(self):
        return sum(line.line_total_cents for line in self.lines)

    @property
    def total_quantity(self):
        return sum(line.quantity for line in self.lines)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_line(self, product_id, quantity, unit_price_cents, available_stock):
        """Add ``quantity`` of a product, merging into an existing line.

        Returns ``(line, created)``.
        """
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.line_for_product(product_id)
        requested = quantity + (existing.quantity if existing else 0)
        if requested > (available_stock or 0):
            raise InsufficientStock(product_id=product_id)

        now = datetime.now(UTC)

        if existing:
            previous_quantity = existing.quantity
            existing.quantity = requested
            existing.updated_at = now
            self.updated_at = now
            self.raise_(
                CartLineQuantityUpdated(
                    cart_id=str(self.id),
                    line_id=str(existing.id),
                    product_id=str(product_id),
                    previous_quantity=previous_quantity,
                    new_quantity=requested,
                )
            )
            return existing, False

        line = CartLine(
            product_id=product_id,
            quantity=quantity,
            price_at_addition_cents=unit_price_cents,
            added_at=now,
            updated_at=now,
        )
        self.add_lines(line)
        self.updated_at = now

        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                line_id=str(line.id),
                product_id=str(product_id),
                quantity=quantity,
                price_at_addition_cents=unit_price_cents,
            )
        )
        return line, True

    def update_line_quantity(self, line_id, quantity, available_stock):
        """Set a line's quantity; quantities below 1 are rejected, not stored."""
        line = self.find_line(line_id)
        if line is None:
            raise NotFound("Cart item not found")
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if quantity > (available_stock or 0):
            raise InsufficientStock(product_id=line.product_id)

        previous_quantity = line.quantity
        now = datetime.now(UTC)
        line.quantity = quantity
        line.updated_at = now
        self.updated_at = now

        self.raise_(
            CartLineQuantityUpdated(
                cart_id=str(self.id),
                line_id=str(line.id),
                product_id=str(line.product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )
        return line

    def remove_line(self, line_id):
        line = self.find_line(line_id)
        if line is None:
            raise NotFound("Cart item not found")

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineRemoved(
                cart_id=str(self.id),
                line_id=str(line_id),
                product_id=str(line.product_id),
            )
        )

    def clear(self):
        """Remove every line. Returns the number of lines removed."""
        removed = list(self.lines)
        for line in removed:
            self.remove_lines(line)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                lines_removed=len(removed),
                cleared_at=now,
            )
        )
        return len(removed)


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_customer(self, customer_id):
        """Return the customer's cart, or ``None`` if they never had one."""
        carts = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return carts[0] if carts else None

    def get_or_create_for(self, customer_id):
        return self.for_customer(customer_id) or Cart.create(customer_id=customer_id)
