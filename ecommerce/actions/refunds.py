# ecommerce/actions/refunds.py
from __future__ import annotations

from typing import Optional

from . import ActionResponse, call

REFUND_STATUSES = ("pending", "approved", "rejected", "processed")


def get_refund_requests_by_vendor(request) -> ActionResponse:
    return call(request, "get", "refunds/vendor/refund-requests/", unwrap="data", msg="Fetched successfully")


def get_approved_refund_requests_by_vendor(request) -> ActionResponse:
    return call(request, "get", "refunds/vendor/approved-refund-requests/", unwrap="data",
                msg="Fetched successfully")


def update_refund_status(request, refund_id, status: str, admin_notes: Optional[str] = None) -> ActionResponse:
    payload = {"status": status}
    if admin_notes:
        payload["admin_notes"] = admin_notes
    return call(request, "put", f"refunds/update-status/{refund_id}/", json=payload, unwrap="data",
                msg="Refund status updated successfully",
                error="An unexpected error occurred",
                errors={400: "Invalid request", 403: "Permission denied", 404: "Refund request not found"},
                backend_message=True)


def create_refund_request(request, order_id, product_id, reason: str) -> ActionResponse:
    return call(request, "post", "refunds/order/refund-request/",
                json={"orderId": order_id, "productId": product_id, "reason": reason.strip()},
                msg="Refund request submitted successfully! Vendor will be notified.",
                error="Failed to submit refund request")
