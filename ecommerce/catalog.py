# ecommerce/catalog.py
"""Pure helpers over backend catalog data: category trees, sorting, paging."""
from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Iterable, Optional

from django.core.paginator import Paginator
from django.utils.text import slugify

from .pricing import to_decimal

SORT_FEATURED = "featured"
SORT_PRICE_LOW = "price-low"
SORT_PRICE_HIGH = "price-high"
SORT_RATING = "rating"
SORT_OPTIONS = (
    (SORT_FEATURED, "Featured"),
    (SORT_PRICE_LOW, "Price: Low to High"),
    (SORT_PRICE_HIGH, "Price: High to Low"),
    (SORT_RATING, "Top Rated"),
)

_SLUG_ID = re.compile(r"(?:^|-)(\d+)$")


# ---- Category tree -------------------------------------------------------------

def _children(category: dict) -> list:
    return category.get("subcategories") or []


def flatten_categories(categories: Iterable[dict], expanded: Iterable, depth: int = 0) -> list:
    """
    Depth-first rows for the category table.
    Children are emitted only under ids present in ``expanded``.
    Each row is {"category", "depth", "has_children", "expanded"}.
    """
    expanded = set(expanded)
    rows = []
    for category in categories or []:
        children = _children(category)
        is_open = category.get("id") in expanded
        rows.append({
            "category": category,
            "depth": depth,
            "has_children": bool(children),
            "expanded": is_open,
        })
        if children and is_open:
            rows.extend(flatten_categories(children, expanded, depth + 1))
    return rows


def _matches(category: dict, term: str) -> bool:
    return term in (category.get("name") or "").lower()


def filter_categories(categories: Iterable[dict], term: str, expanded: Iterable) -> list:
    """
    Rows for a filtered table. A top-level category is kept when its own name,
    or one of its direct subcategories' names, contains ``term``.
    A non-empty term opens every kept branch.
    """
    term = (term or "").strip().lower()
    if not term:
        return flatten_categories(categories, expanded)

    kept = [
        c for c in categories or []
        if _matches(c, term) or any(_matches(sub, term) for sub in _children(c))
    ]
    return flatten_categories(kept, _all_ids(kept))


def _all_ids(categories: Iterable[dict]) -> set:
    ids = set()
    for category in categories:
        ids.add(category.get("id"))
        ids |= _all_ids(_children(category))
    return ids


def parse_expanded(value: Optional[str]) -> set:
    """``"1,4,9"`` -> {1, 4, 9}; junk entries are dropped."""
    ids = set()
    for part in (value or "").split(","):
        part = part.strip()
        if part.isdigit():
            ids.add(int(part))
    return ids


def toggle_expanded(value: Optional[str], category_id: int) -> str:
    ids = parse_expanded(value)
    ids.symmetric_difference_update({category_id})
    return ",".join(str(i) for i in sorted(ids))


def find_category(categories: Iterable[dict], category_id) -> Optional[dict]:
    for category in categories or []:
        if category.get("id") == category_id:
            return category
        found = find_category(_children(category), category_id)
        if found:
            return found
    return None


def category_slug(category: dict) -> str:
    """``{"id": 12, "name": "Running Shoes"}`` -> "running-shoes-12"."""
    name = slugify(category.get("name") or "") or "category"
    return f"{name}-{category.get('id')}"


def with_slugs(categories: Iterable[dict]) -> list:
    """Copy of the tree with a ``slug`` on every node, for templates."""
    return [
        {**c, "slug": category_slug(c), "subcategories": with_slugs(_children(c))}
        for c in categories or []
    ]


def category_id_from_slug(slug: str) -> Optional[int]:
    """``"running-shoes-12"`` -> 12."""
    match = _SLUG_ID.search(slug or "")
    return int(match.group(1)) if match else None


# ---- Products ------------------------------------------------------------------

def _price(product: dict) -> Decimal:
    return to_decimal(product.get("discountedPrice"))


def _rating(product: dict) -> Decimal:
    return to_decimal(product.get("rating") or product.get("avg_rating"))


def sort_products(products: Iterable[dict], option: Optional[str]) -> list:
    products = list(products or [])
    if option == SORT_PRICE_LOW:
        return sorted(products, key=_price)
    if option == SORT_PRICE_HIGH:
        return sorted(products, key=_price, reverse=True)
    if option == SORT_RATING:
        return sorted(products, key=_rating, reverse=True)
    return products


def paginate(items, page, per_page: int):
    """Django Page for ``page``; bad or out-of-range numbers clamp."""
    return Paginator(list(items or []), per_page).get_page(page)


def page_count(count: int, page_size: int) -> int:
    if count <= 0 or page_size <= 0:
        return 0
    return math.ceil(count / page_size)
