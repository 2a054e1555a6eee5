# ecommerce/actions/vendors.py
from __future__ import annotations

from typing import Optional

from . import ActionResponse, call


# ---- Onboarding & public profile ----------------------------------------------

def create_vendor(request, values: dict, files: Optional[dict] = None) -> ActionResponse:
    return call(request, "post", "vendors/createVendor/", data=values, files=files,
                msg="Vendor application submitted successfully", backend_message=True)


def get_vendor(request, vendor_id) -> ActionResponse:
    return call(request, "get", f"vendors/getVendor/{vendor_id}/", unwrap="data", msg="Fetched successfully",
                error="Failed to fetch vendor.", backend_message=True)


# ---- Vendor dashboard ----------------------------------------------------------

def get_vendor_profile(request) -> ActionResponse:
    return call(request, "get", "vendors/getVendorProfile/", unwrap="data", msg="Vendor fetched successfully",
                errors={400: "Invalid input"})


def update_vendor_profile(request, values: dict) -> ActionResponse:
    return call(request, "put", "vendors/updateVendorProfile/", json=values, msg="Vendor updated successfully",
                errors={400: "Invalid input"})


def get_vendor_orders(request, page: int = 1, page_size: int = 10) -> ActionResponse:
    """Paginated by the backend: data is {"count", "results", ...}."""
    return call(request, "get", "vendors/orders/", params={"page": page, "page_size": page_size},
                error="Error fetching orders", backend_message=True)


def update_vendor_order_status(request, order_id, status: str, delivery_date: Optional[str] = None) -> ActionResponse:
    return call(request, "post", f"vendors/orders/{order_id}/update/",
                json={"status": status, "delivery_date": delivery_date},
                msg="Status updated", error="Failed to update status")


def get_ads_by_vendor(request, page: int = 1, page_size: int = 10) -> ActionResponse:
    return call(request, "get", "advertisements/getAdsByVendor/", params={"page": page, "page_size": page_size},
                msg="Advertisements fetched successfully", backend_message=True)


def get_vendor_total_sales(request) -> ActionResponse:
    return call(request, "get", "vendors/salesSummary/", error="Error fetching total sales", backend_message=True)


def get_sales_report(request, start_date: str, end_date: str) -> ActionResponse:
    return call(request, "get", "vendors/salesReport/", params={"start_date": start_date, "end_date": end_date},
                error="Error fetching sales", backend_message=True)


# ---- Superadmin approval -------------------------------------------------------

def get_pending_vendors(request) -> ActionResponse:
    return call(request, "get", "vendors/pending/", error="Failed to fetch pending vendors")


def get_approved_vendors(request) -> ActionResponse:
    return call(request, "get", "vendors/approved/", error="Failed to fetch approved vendors")


def approve_vendor(request, vendor_id) -> ActionResponse:
    return call(request, "patch", f"vendors/approve/{vendor_id}/", json={}, msg="Vendor approved",
                error="Failed to approve vendor")


def reject_vendor(request, vendor_id) -> ActionResponse:
    return call(request, "delete", f"vendors/reject/{vendor_id}/", msg="Vendor rejected",
                error="Failed to reject vendor")


def delete_vendor(request, vendor_id) -> ActionResponse:
    return call(request, "delete", f"vendors/deleteVendor/{vendor_id}/", msg="Vendor deleted",
                error="Failed to delete vendor")
