"""Domain events for the Category and Product aggregates."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Category")
class CategoryCreated:
    """A new category was added to the catalogue."""

    __version__ = "v1"

    category_id: Identifier(required=True)
    name: String(required=True)


@storefront.event(part_of="Category")
class CategoryDetailsUpdated:
    __version__ = "v1"

    category_id: Identifier(required=True)
    name: String(required=True)


@storefront.event(part_of="Category")
class CategoryDeleted:
    """A category was removed; its products are left uncategorised."""

    __version__ = "v1"

    category_id: Identifier(required=True)
    products_detached: Integer(required=True)


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    name: String(required=True)
    category_id: Identifier()
    price_cents: Integer(required=True)
    stock: Integer(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = "v1"

    product_id: Identifier(required=True)
    name: String(required=True)
    category_id: Identifier()


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """The list price changed. Existing cart lines keep their snapshot."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    previous_price_cents: Integer(required=True)
    new_price_cents: Integer(required=True)


@storefront.event(part_of="Product")
class StockAdjusted:
    """Stock was set directly by a catalogue administrator."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    """Stock was taken out for an order at checkout."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)


@storefront.event(part_of="Product")
class StockRestored:
    """A previous withdrawal was undone."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)


@storefront.event(part_of="Product")
class ProductDeleted:
    """A product was removed from the catalogue. Cart lines that reference it can no longer be checked out."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    name: String(required=True)
