# ecommerce/actions/cart.py
from __future__ import annotations

from typing import Optional

from . import ActionResponse, call

# Backend spelling, kept verbatim.
ITEM_EXISTS = "Item Exits"


def get_cart(request) -> ActionResponse:
    return call(request, "get", "cart/", unwrap="data", msg="Cart fetched successfully",
                error="Error fetching cart")


def add_to_cart(request, product_id, quantity: int = 1, size: Optional[str] = None) -> ActionResponse:
    """Add a product; ``data["already_in_cart"]`` flags the backend's duplicate answer."""
    payload = {"productID": product_id, "product_type": "product", "quantity": quantity}
    if size:
        payload["size"] = size
    res = call(request, "post", "cart/", json=payload, msg="Item added to cart successfully!",
               error="Something went wrong", backend_message=True)
    if res.ok:
        already = res.msg == ITEM_EXISTS
        res.data = {"already_in_cart": already, "response": res.data}
        if already:
            res.msg = "This item is already in your cart."
    return res


def update_cart_quantity(request, product_id, quantity: int, size: Optional[str] = None) -> ActionResponse:
    payload = {"productID": product_id, "quantity": quantity, "overide_quantity": True}
    if size:
        payload["size"] = size
    return call(request, "put", "cart/", json=payload, msg="Quantity updated.",
                error="Something went wrong", backend_message=True)


def remove_from_cart(request, product_id) -> ActionResponse:
    return call(request, "delete", f"cart/{product_id}", msg="Item removed from cart.",
                error="Error deleting item")


def clear_cart(request) -> ActionResponse:
    """Empty the cart after a wallet payment went through."""
    return call(request, "post", "cart/", json={"clear": True}, msg="Cart cleared",
                error="Failed to clear cart")
