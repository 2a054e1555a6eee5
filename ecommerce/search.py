# ecommerce/search.py
"""Product autocomplete backed by the Django cache."""
from __future__ import annotations

import hashlib
import logging

from django.conf import settings
from django.core.cache import cache

from .actions.products import search_products

logger = logging.getLogger(__name__)

CACHE_PREFIX = "product_search"


def make_cache_key(query: str) -> str:
    """Keyed by the exact query string; hashed to keep memcached-safe keys."""
    digest = hashlib.md5(query.encode("utf-8")).hexdigest()
    return f"{CACHE_PREFIX}:{digest}"


def autocomplete(request, query: str) -> list:
    """
    Suggestions for ``query``. Short queries never reach the backend.
    Successful answers are cached for SEARCH_CACHE_TTL; failures are not.
    """
    query = (query or "").strip()
    if len(query) < getattr(settings, "SEARCH_MIN_LENGTH", 2):
        return []

    key = make_cache_key(query)
    results = cache.get(key)
    if results is not None:
        logger.debug("Cache HIT for %s: %s", CACHE_PREFIX, query)
        return results

    logger.debug("Cache MISS for %s: %s", CACHE_PREFIX, query)
    res = search_products(request, query)
    if not res.ok:
        return []

    results = res.data if isinstance(res.data, list) else []
    cache.set(key, results, settings.SEARCH_CACHE_TTL)
    return results
