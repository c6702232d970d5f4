"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Cart")
class CartLineAdded:
    """A product was put in the cart for the first time."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    price_at_addition_cents = Integer(required=True)


@storefront.event(part_of="Cart")
class CartLineQuantityUpdated:
    """The quantity of an existing cart line changed (explicit update or repeated add)."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartLineRemoved:
    __version__ = "v1"

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.event(part_of="Cart")
class CartCleared:
    """Every line was removed, explicitly or after a successful checkout."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    lines_removed = Integer(required=True)
    cleared_at = DateTime(required=True)
