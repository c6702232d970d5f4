"""Cart line management.

Every command is scoped to ``customer_id``: lines are only ever looked up in
the caller's own cart, so a line belonging to someone else is reported as
not found rather than forbidden.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.queries import find_product
from storefront.domain import storefront
from storefront.ordering.cart.cart import Cart
from storefront.shared.errors import NotFound


@storefront.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class UpdateCartLine:
    customer_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class RemoveCartLine:
    customer_id = Identifier(required=True)
    line_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


@storefront.command_handler(part_of=Cart)
class ManageCartLinesHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = find_product(command.product_id)
        if product is None:
            raise NotFound("Product not found")

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create_for(command.customer_id)
        line, created = cart.add_line(
            product_id=command.product_id,
            quantity=command.quantity,
            unit_price_cents=product.price_cents,
            available_stock=product.stock,
        )
        repo.add(cart)
        return {"line_id": str(line.id), "created": created}

    @handle(UpdateCartLine)
    def update_cart_line(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_customer(command.customer_id)
        line = cart.find_line(command.line_id) if cart else None
        if line is None:
            raise NotFound("Cart item not found")

        product = find_product(line.product_id)
        cart.update_line_quantity(
            line_id=command.line_id,
            quantity=command.quantity,
            available_stock=product.stock if product else 0,
        )
        repo.add(cart)
        return str(line.id)

    @handle(RemoveCartLine)
    def remove_cart_line(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_customer(command.customer_id)
        if cart is None:
            raise NotFound("Cart item not found")

        cart.remove_line(command.line_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_customer(command.customer_id)
        if cart is None:
            return 0

        removed = cart.clear()
        repo.add(cart)
        return removed
