"""FastAPI endpoints for the Cart and Orders."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from storefront.identity.access import Caller, current_caller, require_admin
from storefront.ordering.api.schemas import (
    AddToCartRequest,
    UpdateCartLineRequest,
    UpdateOrderStatusRequest,
)
from storefront.ordering.cart.items import AddToCart, ClearCart, RemoveCartLine, UpdateCartLine
from storefront.ordering.cart.queries import find_cart_line, get_cart, serialize_cart_line
from storefront.ordering.checkout.saga import checkout
from storefront.ordering.order.queries import get_order, list_orders, serialize_order
from storefront.ordering.order.status import UpdateOrderStatus

cart_router = APIRouter(prefix="/api/cart", tags=["cart"])
order_router = APIRouter(prefix="/api/orders", tags=["orders"])


# --- Cart endpoints ---


@cart_router.get("")
async def view_cart(caller: Caller = Depends(current_caller)):
    return get_cart(caller.id)


@cart_router.post("")
async def add_to_cart(body: AddToCartRequest, caller: Caller = Depends(current_caller)):
    command = AddToCart(
        customer_id=caller.id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    result = current_domain.process(command, asynchronous=False)

    line = find_cart_line(caller.id, result["line_id"])
    if result["created"]:
        return JSONResponse(
            status_code=201,
            content={
                "message": "Product added to cart",
                "cartItem": serialize_cart_line(line, caller.id),
            },
        )
    return {"message": "Cart updated successfully", "cartItem": serialize_cart_line(line, caller.id)}


@cart_router.put("/{line_id}")
async def update_cart_line(line_id: str, body: UpdateCartLineRequest, caller: Caller = Depends(current_caller)):
    command = UpdateCartLine(customer_id=caller.id, line_id=line_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)

    line = find_cart_line(caller.id, line_id)
    return {"message": "Cart item updated", "cartItem": serialize_cart_line(line, caller.id, with_product=True)}


@cart_router.delete("/{line_id}")
async def remove_cart_line(line_id: str, caller: Caller = Depends(current_caller)):
    current_domain.process(RemoveCartLine(customer_id=caller.id, line_id=line_id), asynchronous=False)
    return {"message": "Item removed from cart"}


@cart_router.delete("")
async def clear_cart(caller: Caller = Depends(current_caller)):
    current_domain.process(ClearCart(customer_id=caller.id), asynchronous=False)
    return {"message": "Cart cleared successfully"}


# --- Order endpoints ---


@order_router.post("", status_code=201)
async def create_order(caller: Caller = Depends(current_caller)):
    order = checkout(caller.id)
    return {"message": "Order placed successfully", "order": serialize_order(order, with_lines=False)}


@order_router.get("")
async def get_orders(caller: Caller = Depends(current_caller)):
    return {"orders": [serialize_order(order) for order in list_orders(caller.scope())]}


@order_router.get("/{order_id}")
async def get_order_by_id(order_id: str, caller: Caller = Depends(current_caller)):
    return {"order": serialize_order(get_order(order_id, caller.scope()))}


@order_router.put("/{order_id}")
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    caller: Caller = Depends(require_admin),
):
    # A missing order is a 404 even when the status is also invalid
    get_order(order_id, caller.scope())
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return {
        "message": "Order status updated",
        "order": serialize_order(get_order(order_id, caller.scope()), with_lines=False),
    }
