# ecommerce/actions/faqs.py
from __future__ import annotations

from . import ActionResponse, call


def get_all_faqs(request) -> ActionResponse:
    return call(request, "get", "faqs/all/", msg="FAQs fetched successfully", error="Failed to fetch FAQs")


def get_faq(request, faq_id) -> ActionResponse:
    return call(request, "get", f"faqs/detail/{faq_id}/", msg="FAQ fetched successfully",
                error="Failed to fetch FAQ")


def create_faq(request, values: dict) -> ActionResponse:
    return call(request, "post", "faqs/create/", json=values, msg="FAQ created successfully",
                error="Failed to create FAQ", errors={400: "Validation error"})


def update_faq(request, faq_id, values: dict) -> ActionResponse:
    return call(request, "put", f"faqs/update/{faq_id}/", json=values, msg="FAQ updated successfully",
                error="Failed to update FAQ", errors={400: "Validation error"})


def delete_faq(request, faq_id) -> ActionResponse:
    return call(request, "delete", f"faqs/delete/{faq_id}/", msg="FAQ deleted successfully",
                error="Failed to delete FAQ")
