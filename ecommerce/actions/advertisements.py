# ecommerce/actions/advertisements.py
from __future__ import annotations

from typing import Optional

from . import ActionResponse, call

AD_POSITIONS = (
    "homepage_middle",
    "homepage_bottom",
    "productpage_sidebar",
    "marketplace",
    "above_navbar",
    "sidebar",
    "footer",
)


def get_pending_ads(request) -> ActionResponse:
    return call(request, "get", "advertisements/getAllPendingAds/", msg="Fetched Successfully")


def get_active_ads(request) -> ActionResponse:
    return call(request, "get", "advertisements/active-ads/", msg="Fetched Successfully")


def get_ads_by_position(request, position: str) -> ActionResponse:
    return call(request, "get", f"advertisements/getAdsByPosition/{position}/", msg="Fetched Successfully")


def create_advertisement(request, values: dict, files: Optional[dict] = None) -> ActionResponse:
    return call(request, "post", "advertisements/vendor/create/", data=values, files=files,
                msg="Advertisement created successfully!", error="Failed to create advertisement.",
                backend_message=True)


def approve_ad(request, ad_id) -> ActionResponse:
    return call(request, "patch", f"advertisements/approve/{ad_id}/", msg="Advertisement approved",
                error="Failed to approve advertisement")


def reject_ad(request, ad_id) -> ActionResponse:
    return call(request, "delete", f"advertisements/reject/{ad_id}/", msg="Advertisement rejected",
                error="Failed to reject advertisement")


def update_ad_payment_status(request, ad_id) -> ActionResponse:
    return call(request, "patch", f"advertisements/updatePaymentStatus/{ad_id}/", msg="Payment status updated",
                error="Failed to update payment status")
