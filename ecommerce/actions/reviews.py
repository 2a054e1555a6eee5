# ecommerce/actions/reviews.py
from __future__ import annotations

from typing import Iterable

from . import ActionResponse, call


# ---- Product reviews -----------------------------------------------------------

def create_product_review(request, product_id, rating: int, comment: str) -> ActionResponse:
    return call(request, "post", "reviews/create/",
                json={"product": product_id, "rating": rating, "comment": comment},
                msg="Review submitted successfully",
                error="An error occurred while submitting the review",
                errors={400: "Please login to review the product"},
                backend_message=True)


def get_product_reviews(request, product_id) -> ActionResponse:
    return call(request, "get", "reviews/getReviews/", params={"product_id": product_id}, unwrap="data",
                error="Failed to fetch product reviews.", backend_message=True)


def get_batch_product_review_stats(request, product_ids: Iterable) -> ActionResponse:
    """Data on success: {"<product_id>": {"avg_rating", "total_reviews"}}."""
    ids = [pid for pid in product_ids if pid is not None]
    if not ids:
        return ActionResponse(data={}, status=200)
    return call(request, "get", "reviews/batch-product-review-stats/", params={"product_ids": ids},
                error="Failed to fetch batch product review stats.", backend_message=True)


def delete_product_review(request, review_id) -> ActionResponse:
    return call(request, "delete", f"reviews/deleteReview/{review_id}/", msg="Review deleted successfully",
                error="Failed to delete review.", backend_message=True)


# ---- Vendor replies ------------------------------------------------------------

def create_vendor_reply(request, review_id, reply: str) -> ActionResponse:
    return call(request, "post", f"reviews/product-reviews/{review_id}/replies/create/", json={"reply": reply},
                msg="Reply posted successfully", error="Failed to post reply.", backend_message=True)


def update_vendor_reply(request, reply_id, reply: str) -> ActionResponse:
    return call(request, "put", f"reviews/replies/{reply_id}/update/", json={"reply": reply},
                msg="Reply updated successfully", error="Failed to update reply.", backend_message=True)


def delete_vendor_reply(request, reply_id) -> ActionResponse:
    return call(request, "delete", f"reviews/replies/{reply_id}/delete/", msg="Reply deleted successfully",
                error="Failed to delete reply.", backend_message=True)


# ---- Vendor reviews ------------------------------------------------------------

def create_vendor_review(request, vendor_id, rating: int, comment: str) -> ActionResponse:
    return call(request, "post", "reviews/vendor-reviews/create/",
                json={"vendor": vendor_id, "rating": rating, "comment": comment},
                msg="Vendor review submitted successfully",
                error="An error occurred while submitting the vendor review",
                errors={400: "Please login to review the vendor"},
                backend_message=True)


def get_vendor_reviews(request, vendor_id) -> ActionResponse:
    return call(request, "get", "reviews/vendor-reviews/", params={"vendor_id": vendor_id}, unwrap="data",
                error="Failed to fetch vendor reviews.", backend_message=True)


def delete_vendor_review(request, review_id) -> ActionResponse:
    return call(request, "delete", f"reviews/vendor-reviews/delete/{review_id}/",
                msg="Vendor review deleted successfully", error="Failed to delete vendor review.",
                backend_message=True)
