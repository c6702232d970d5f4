"""Order read side, always filtered through the caller's ``VisibilityScope``."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.queries import find_product
from storefront.ordering.order.order import Order
from storefront.shared.errors import NotFound
from storefront.shared.money import format_cents


def _product_summary(product_id):
    product = find_product(product_id)
    if product is None:
        return None
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "imageUrl": product.image_url,
    }


def serialize_order_line(line, order_id):
    return {
        "id": str(line.id),
        "orderId": str(order_id),
        "productId": str(line.product_id),
        "quantity": line.quantity,
        "priceAtPurchase": format_cents(line.price_at_purchase_cents),
        "product": _product_summary(line.product_id),
    }


def serialize_order(order, with_lines=True):
    data = {
        "id": str(order.id),
        "userId": str(order.customer_id),
        "totalAmount": format_cents(order.total_amount_cents),
        "status": order.status,
        "createdAt": order.created_at.isoformat() if order.created_at else None,
        "updatedAt": order.updated_at.isoformat() if order.updated_at else None,
    }
    if with_lines:
        data["orderItems"] = [serialize_order_line(line, order.id) for line in order.lines]
    return data


def get_order(order_id, scope):
    """Return the order if it exists and ``scope`` may see it.

    Orders outside the scope are reported exactly like missing ones.
    """
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise NotFound("Order not found") from None

    if not scope.permits(order.customer_id):
        raise NotFound("Order not found")
    return order


def list_orders(scope):
    """Orders visible to ``scope``, newest first."""
    query = current_domain.repository_for(Order)._dao.query
    if not scope.is_unrestricted:
        query = query.filter(customer_id=str(scope.customer_id))
    return query.order_by("-created_at").limit(None).all().items
