# ecommerce/actions/categories.py
from __future__ import annotations

from . import ActionResponse, call


def get_active_categories(request) -> ActionResponse:
    return call(request, "get", "products/getCategories/", unwrap="data", msg="Categories fetched successfully")


def create_category(request, values: dict, files: dict | None = None) -> ActionResponse:
    return call(request, "post", "products/createCategory/", data=values, files=files,
                msg="Category created successfully", backend_message=True)


def update_category(request, category_id, values: dict, files: dict | None = None) -> ActionResponse:
    return call(request, "put", f"products/updateCategory/{category_id}/", data=values, files=files,
                msg="Category updated successfully", backend_message=True)


def delete_category(request, category_id) -> ActionResponse:
    return call(request, "delete", f"products/deleteCategory/{category_id}/",
                msg="Category deleted successfully",
                error="An error occurred while deleting the category", backend_message=True)
