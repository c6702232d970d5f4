"""Product aggregate — the catalogue's record of price and stock.

Checkout reads ``price_cents`` only when a product is first put in a cart
(the price snapshot) and changes ``stock`` only through ``withdraw_stock``
and ``restock``. ``withdraw_stock`` is conditional: it checks the quantity
against the stock on the row it was loaded from and refuses to go negative.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.catalogue.events import (
    ProductCreated,
    ProductDeleted,
    ProductDetailsUpdated,
    ProductPriceChanged,
    StockAdjusted,
    StockRestored,
    StockWithdrawn,
)
from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    description: Text()
    price_cents: Integer(required=True, min_value=0)
    stock: Integer(default=0, min_value=0)
    category_id: Identifier()
    image_url: String(max_length=500)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, price_cents, stock=0, description=None, category_id=None, image_url=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price_cents=price_cents,
            stock=stock,
            category_id=category_id,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                category_id=category_id,
                price_cents=price_cents,
                stock=stock,
                created_at=now,
            )
        )
        return product

    def update_details(
        self,
        name=None,
        description=None,
        price_cents=None,
        stock=None,
        category_id=None,
        image_url=None,
    ):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if category_id is not None:
            self.category_id = category_id
        if image_url is not None:
            self.image_url = image_url

        if price_cents is not None and price_cents != self.price_cents:
            previous_price = self.price_cents
            self.price_cents = price_cents
            self.raise_(
                ProductPriceChanged(
                    product_id=self.id,
                    previous_price_cents=previous_price,
                    new_price_cents=price_cents,
                )
            )

        if stock is not None and stock != self.stock:
            if stock < 0:
                raise ValidationError({"stock": ["Stock must be a non-negative integer"]})
            previous_stock = self.stock
            self.stock = stock
            self.raise_(StockAdjusted(product_id=self.id, previous_stock=previous_stock, new_stock=stock))

        self.updated_at = datetime.now(UTC)

        self.raise_(ProductDetailsUpdated(product_id=self.id, name=self.name, category_id=self.category_id))

    def detach_category(self):
        """Leave the product uncategorised after its category is removed."""
        self.category_id = None
        self.updated_at = datetime.now(UTC)

        self.raise_(ProductDetailsUpdated(product_id=self.id, name=self.name, category_id=None))

    def mark_deleted(self):
        self.raise_(ProductDeleted(product_id=self.id, name=self.name))

    def has_stock_for(self, quantity) -> bool:
        return quantity <= (self.stock or 0)

    def withdraw_stock(self, quantity):
        """Take ``quantity`` units out of stock, or fail without touching it."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.has_stock_for(quantity):
            raise InsufficientStock(product_id=self.id)

        self.stock = self.stock - quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(StockWithdrawn(product_id=self.id, quantity=quantity, remaining=self.stock))

    def restock(self, quantity):
        """Put back units taken by ``withdraw_stock``."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        self.stock = (self.stock or 0) + quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(StockRestored(product_id=self.id, quantity=quantity, remaining=self.stock))
