# ecommerce/actions/wishlist.py
from __future__ import annotations

from . import ActionResponse, call


def create_wishlist_item(request, product_id) -> ActionResponse:
    return call(request, "post", "wishlist/add/", json={"product_id": product_id},
                msg="Added to wishlist successfully",
                error="An error occurred while adding to wishlist",
                errors={404: "Product not found"}, backend_message=True)


def get_user_wishlist(request) -> ActionResponse:
    return call(request, "get", "wishlist/get", msg="Wishlist fetched successfully",
                error="An unexpected error occurred",
                errors={401: "Please login to view your wishlist", 403: "Please login to view your wishlist"})


def remove_wishlist_item(request, wishlist_item_id) -> ActionResponse:
    return call(request, "delete", f"wishlist/remove/{wishlist_item_id}/", msg="Removed from wishlist",
                error="Failed to remove item from wishlist", backend_message=True)
