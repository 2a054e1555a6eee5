# ecommerce/actions/orders.py
from __future__ import annotations

import logging

from functions.backend import BackendError, client_for_request

from . import ActionResponse, call

logger = logging.getLogger(__name__)


def create_order(request, payload: dict) -> ActionResponse:
    return call(request, "post", "order/createOrder/", json=payload, msg="Order placed successfully!",
                error="Something went wrong. Please try again.")


def fetch_orders(request) -> ActionResponse:
    return call(request, "get", "order/getOrders/", msg="Orders fetched successfully")


def fetch_order_details(request, order_id) -> ActionResponse:
    return call(request, "get", f"order/getOrder/{order_id}/", msg="Order details fetched successfully")


def mark_order_received(request, order_id) -> ActionResponse:
    return call(request, "post", f"order/updateStatus/{order_id}/received/",
                msg="Order marked as received", error="Failed to update order status")


def download_receipt(request, order_id) -> ActionResponse:
    """Fetch the receipt PDF; ``data`` holds the raw bytes and content type."""
    try:
        response = client_for_request(request).get(f"order/downloadReceipt/{order_id}/")
    except BackendError as exc:
        logger.warning("Receipt download for order %s failed: %s", order_id, exc.status)
        return ActionResponse(data=None, error="Failed to download receipt", status=exc.status or 500)
    return ActionResponse(
        data={
            "content": response.content,
            "content_type": response.headers.get("Content-Type", "application/pdf"),
        },
        status=response.status_code,
        msg="Receipt downloaded",
    )
