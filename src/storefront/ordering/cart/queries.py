"""Cart read model."""

from protean.utils.globals import current_domain

from storefront.catalogue.queries import category_summary, find_product
from storefront.ordering.cart.cart import Cart
from storefront.shared.money import format_cents


def _product_summary(product_id):
    product = find_product(product_id)
    if product is None:
        return None
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": format_cents(product.price_cents),
        "stock": product.stock,
        "imageUrl": product.image_url,
        "category": category_summary(product.category_id),
    }


def serialize_cart_line(line, customer_id, with_product=False):
    data = {
        "id": str(line.id),
        "userId": str(customer_id),
        "productId": str(line.product_id),
        "quantity": line.quantity,
        "priceAtAddition": format_cents(line.price_at_addition_cents),
        "addedAt": line.added_at.isoformat() if line.added_at else None,
        "updatedAt": line.updated_at.isoformat() if line.updated_at else None,
    }
    if with_product:
        data["product"] = _product_summary(line.product_id)
    return data


def find_cart_line(customer_id, line_id):
    cart = current_domain.repository_for(Cart).for_customer(customer_id)
    return cart.find_line(line_id) if cart else None


def get_cart(customer_id):
    """Return ``{"cartItems": [...], "summary": {...}}`` for the customer."""
    cart = current_domain.repository_for(Cart).for_customer(customer_id)
    lines = sorted(cart.lines, key=lambda line: line.added_at) if cart else []

    return {
        "cartItems": [serialize_cart_line(line, customer_id, with_product=True) for line in lines],
        "summary": {
            "itemCount": len(lines),
            "totalQuantity": sum(line.quantity for line in lines),
            "total": format_cents(sum(line.line_total_cents for line in lines)),
        },
    }
