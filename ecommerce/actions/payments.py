# ecommerce/actions/payments.py
from __future__ import annotations

from . import ActionResponse, call


def init_khalti(request, payload: dict) -> ActionResponse:
    """Data on success: {"payment_url": ...} to redirect the buyer to."""
    return call(request, "post", "payment/initKhalti/", json=payload, unwrap="data",
                msg="Redirecting to Khalti", error="Something went wrong. Please try again.")


def init_esewa(request, payload: dict) -> ActionResponse:
    """Data on success: the signed form fields eSewa expects."""
    return call(request, "post", "payment/initEsewa/", json=payload, unwrap="data",
                msg="Redirecting to eSewa", error="Something went wrong. Please try again.")


def verify_khalti(request, params: dict) -> ActionResponse:
    return call(request, "get", "payment/verifyKhalti/", params=params,
                msg="Payment verified", error="Payment verification failed")


def verify_esewa(request, payload: dict) -> ActionResponse:
    return call(request, "post", "payment/verifyEsewa/", json=payload,
                msg="Payment verified and order placed successfully!",
                error="Something went wrong during verification.")
