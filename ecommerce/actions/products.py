# ecommerce/actions/products.py
from __future__ import annotations

from . import ActionResponse, call


def create_product(request, values: dict, files: dict | None = None) -> ActionResponse:
    return call(request, "post", "products/createProduct/", data=values, files=files,
                msg="Created successfully")


def update_product(request, product_id, values: dict, files: dict | None = None) -> ActionResponse:
    return call(request, "put", f"products/updateProduct/{product_id}/", data=values, files=files,
                msg="Product updated successfully", error="Failed to update product",
                backend_message=True)


def delete_product(request, product_id) -> ActionResponse:
    return call(request, "delete", f"products/deleteProduct/{product_id}/",
                msg="Product deleted successfully", error="Failed to delete product",
                backend_message=True)


def get_product(request, product_id) -> ActionResponse:
    return call(request, "get", f"products/getProduct/{product_id}", unwrap="data",
                msg="Product fetched successfully", error="Failed to fetch product",
                backend_message=True)


def get_active_products(request) -> ActionResponse:
    return call(request, "get", "products/getAllProducts/", unwrap="data", msg="Fetched successfully")


def get_products_by_location(request, location: str) -> ActionResponse:
    return call(request, "get", f"products/location/{location}", msg="Fetched successfully",
                error="An error occurred while fetching products by location.")


def get_products_by_category(request, category_id: int) -> ActionResponse:
    return call(request, "get", f"products/getProductByCategory/{category_id}", unwrap="data",
                msg="Fetched successfully", error="Failed to fetch products by category")


def search_products(request, query: str) -> ActionResponse:
    return call(request, "get", "products/searchProduct/", params={"query": query}, unwrap="results",
                msg="Search results fetched successfully")


def get_products_by_vendor(request) -> ActionResponse:
    return call(request, "get", "products/getProductsByVendor/", unwrap="data", msg="Fetched successfully")


def get_products_by_vendor_id(request, vendor_id) -> ActionResponse:
    return call(request, "get", f"products/getProductsByVendorId/{vendor_id}/", unwrap="data",
                msg="Products fetched successfully",
                error="An error occurred while fetching products",
                errors={400: "Bad request", 404: "Vendor not found or no products available"})
