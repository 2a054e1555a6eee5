# ecommerce/actions/coupons.py
from __future__ import annotations

from functions.backend import BackendError, client_for_request

from . import ActionResponse, call, decode


def get_coupons(request) -> ActionResponse:
    return call(request, "get", "coupons/getCoupons/", msg="Coupons fetched successfully",
                errors={400: "Couldn't fetch coupons."})


def create_coupon(request, values: dict) -> ActionResponse:
    return call(request, "post", "coupons/createCoupon/", json=values, msg="Coupon created successfully!",
                error="Failed to create coupon", backend_message=True)


def update_coupon(request, coupon_id, values: dict) -> ActionResponse:
    return call(request, "put", f"coupons/updateCoupon/{coupon_id}/", json=values,
                msg="Coupon updated successfully!", error="Failed to update coupon", backend_message=True)


def delete_coupon(request, coupon_id) -> ActionResponse:
    return call(request, "delete", f"coupons/deleteCoupon/{coupon_id}/", msg="Coupon deleted successfully!",
                error="Failed to delete coupon")


def verify_coupon(request, code: str) -> ActionResponse:
    """
    Ask the backend whether ``code`` is usable for this user.
    Data on success: {"code", "discount_type", "discount_value"}.
    """
    try:
        response = client_for_request(request).post("coupons/verifyCoupon/", json={"code": code})
    except BackendError as exc:
        if exc.status == 400:
            if exc.payload.get("message") == "used_coupon":
                error = "You have already used this coupon."
            else:
                error = "Exceeded Limit or Expired"
        elif exc.status == 404:
            error = "Invalid coupon code."
        else:
            error = "Something went wrong"
        return ActionResponse(data=None, error=error, status=exc.status or 500)

    body = decode(response)
    return ActionResponse(
        data={
            "code": code,
            "discount_type": body.get("discount_type"),
            "discount_value": body.get("discount_value"),
        },
        status=response.status_code,
        msg="Coupon applied successfully",
    )
