"""Stock movements requested by checkout.

``WithdrawStock`` reloads the product inside its own unit of work and only
decrements when enough stock is left, so a shortfall caused by a concurrent
checkout surfaces here as ``InsufficientStock`` instead of negative stock.
``RestockProduct`` is its compensation.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock


@storefront.command(part_of="Product")
class WithdrawStock:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class RestockProduct:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@storefront.command_handler(part_of=Product)
class StockMovementHandler:
    @handle(WithdrawStock)
    def withdraw_stock(self, command):
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            # A product deleted after validation can no longer be supplied
            raise InsufficientStock(product_id=command.product_id) from None

        product.withdraw_stock(command.quantity)
        repo.add(product)
        return product.stock

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)
        return product.stock
