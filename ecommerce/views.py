"""Storefront views: catalog, cart, checkout and payments, wishlist, and reviews."""

from __future__ import annotations

import base64
import binascii
import json
import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, Http404
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from . import catalog, pricing
from .actions import cart as cart_actions
from .actions import categories as category_actions
from .actions import coupons as coupon_actions
from .actions import orders as order_actions
from .actions import payments as payment_actions
from .actions import products as product_actions
from .actions import reviews as review_actions
from .actions import rewards as reward_actions
from .actions import vendors as vendor_actions
from .actions import wishlist as wishlist_actions
from .forms import CheckoutForm, CouponCodeForm, ReviewForm, RewardForm, VendorReplyForm

logger = logging.getLogger(__name__)

LOGIN_URL = "accounts:login"
CHECKOUT_SESSION_KEY = "checkout"


# ---- Helpers ------------------------------------------------------------------

def _get_next_url(request: HttpRequest) -> str:
    """
    Return a safe 'next' URL from POST or GET (empty string if absent/unsafe).
    Prevents open-redirects by restricting to the current host.
    """
    raw = (request.POST.get("next") or request.GET.get("next", "")).strip()
    if raw and url_has_allowed_host_and_scheme(raw, allowed_hosts={request.get_host()}):
        return raw
    return ""


def _flash(request: HttpRequest, res) -> bool:
    """Surface an action result as a flash message; True when it succeeded."""
    if res.ok:
        if res.msg:
            messages.success(request, res.msg)
        return True
    messages.error(request, res.error)
    return False


def _as_list(data) -> list:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("results", "data"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


def _int(value, default: int = 1) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _with_review_stats(request: HttpRequest, products: list) -> list:
    """Attach avg_rating / total_reviews from the batch stats endpoint."""
    res = review_actions.get_batch_product_review_stats(request, [p.get("id") for p in products])
    stats = res.data if res.ok and isinstance(res.data, dict) else {}
    for product in products:
        entry = stats.get(str(product.get("id"))) or {}
        product["avg_rating"] = entry.get("avg_rating", 0)
        product["total_reviews"] = entry.get("total_reviews", 0)
    return products


def _listing(request: HttpRequest, template: str, res, extra: dict | None = None):
    """Shared render for every product grid: sort, rate, paginate."""
    if not res.ok:
        messages.error(request, res.error)
    sort = request.GET.get("sort", catalog.SORT_FEATURED)
    products = _with_review_stats(request, _as_list(res.data))
    products = catalog.sort_products(products, sort)
    page = catalog.paginate(products, request.GET.get("page"), settings.PRODUCTS_PER_PAGE)
    context = {"page_obj": page, "products": page.object_list, "sort": sort, "sort_options": catalog.SORT_OPTIONS}
    context.update(extra or {})
    return render(request, template, context)


# ---- Catalog (Public) ----------------------------------------------------------

def product_list(request: HttpRequest):
    """Public: every active product, sortable and paginated."""
    return _listing(request, "catalog/product_list.html", product_actions.get_active_products(request))


def category_products(request: HttpRequest, slug: str):
    category_id = catalog.category_id_from_slug(slug)
    if category_id is None:
        raise Http404("Unknown category")
    return _listing(
        request,
        "catalog/product_list.html",
        product_actions.get_products_by_category(request, category_id),
        {"title": slug.rsplit("-", 1)[0].replace("-", " ").title()},
    )


def location_products(request: HttpRequest, location: str):
    return _listing(
        request,
        "catalog/product_list.html",
        product_actions.get_products_by_location(request, location),
        {"title": location.title()},
    )


def search_results(request: HttpRequest):
    """Full results page; the header box uses the cached api/search/ endpoint."""
    q = request.GET.get("q", "").strip()
    if len(q) < settings.SEARCH_MIN_LENGTH:
        return render(request, "catalog/product_list.html", {"products": [], "q": q, "title": "Search"})
    return _listing(request, "catalog/product_list.html", product_actions.search_products(request, q),
                    {"q": q, "title": f'Results for "{q}"'})


def category_list(request: HttpRequest):
    res = category_actions.get_active_categories(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "catalog/category_list.html", {"categories": catalog.with_slugs(_as_list(res.data))})


def product_detail(request: HttpRequest, pk: int):
    """Public: a single product with its reviews and the add-to-cart form."""
    res = product_actions.get_product(request, pk)
    if not res.ok:
        if res.status == 404:
            raise Http404("Product not found")
        messages.error(request, res.error)
        return redirect("ecommerce:product_list")

    reviews = review_actions.get_product_reviews(request, pk)
    review_form = ReviewForm() if request.user.is_authenticated else None
    return render(request, "catalog/product_detail.html", {
        "product": res.data,
        "reviews": _as_list(reviews.data),
        "review_form": review_form,
        "reply_form": VendorReplyForm() if getattr(request.user, "is_vendor", False) else None,
    })


def vendor_page(request: HttpRequest, vendor_id: int):
    """Public vendor storefront: profile, products and vendor reviews."""
    vendor = vendor_actions.get_vendor(request, vendor_id)
    if not vendor.ok:
        if vendor.status == 404:
            raise Http404("Vendor not found")
        messages.error(request, vendor.error)
        return redirect("ecommerce:product_list")
    reviews = review_actions.get_vendor_reviews(request, vendor_id)
    return _listing(
        request,
        "catalog/vendor_page.html",
        product_actions.get_products_by_vendor_id(request, vendor_id),
        {
            "vendor": vendor.data,
            "vendor_reviews": _as_list(reviews.data),
            "review_form": ReviewForm() if request.user.is_authenticated else None,
        },
    )


# ---- Cart ----------------------------------------------------------------------

@login_required(login_url=LOGIN_URL)
def view_cart(request: HttpRequest):
    """Render the backend cart with line totals and the subtotal."""
    res = cart_actions.get_cart(request)
    if not res.ok:
        messages.error(request, res.error)
    totals = pricing.compute_totals(_as_list(res.data))
    return render(request, "cart.html", {"items": _as_list(res.data), "totals": totals})


@require_POST
@login_required(login_url=LOGIN_URL)
def add_to_cart(request: HttpRequest):
    """
    Add a product to the backend cart.

    POST fields:
      - product_id (required)
      - quantity (optional, defaults to 1; min=1)
      - size (required when has_sizes is set)
    """
    next_url = _get_next_url(request) or "ecommerce:view_cart"
    product_id = request.POST.get("product_id", "").strip()
    if not product_id.isdigit():
        messages.error(request, "Invalid product.")
        return redirect(next_url)

    size = request.POST.get("size", "").strip() or None
    if request.POST.get("has_sizes") in ("true", "True", "1", "on") and not size:
        messages.error(request, "Please select a size.")
        return redirect(next_url)

    quantity = max(_int(request.POST.get("quantity"), 1), 1)
    res = cart_actions.add_to_cart(request, int(product_id), quantity, size)
    if res.ok and res.data["already_in_cart"]:
        messages.info(request, res.msg)
    else:
        _flash(request, res)
    return redirect(next_url)


def _change_quantity(request: HttpRequest, product_id: int, step: int):
    current = _int(request.POST.get("quantity"), 1)
    quantity = max(1, current + step)
    size = request.POST.get("size", "").strip() or None
    res = cart_actions.update_cart_quantity(request, product_id, quantity, size)
    if not res.ok:
        messages.error(request, res.error)
    return redirect("ecommerce:view_cart")


@require_POST
@login_required(login_url=LOGIN_URL)
def increase_quantity(request: HttpRequest, product_id: int):
    return _change_quantity(request, product_id, 1)


@require_POST
@login_required(login_url=LOGIN_URL)
def decrease_quantity(request: HttpRequest, product_id: int):
    """Quantity never drops below 1; removing is a separate action."""
    return _change_quantity(request, product_id, -1)


@require_POST
@login_required(login_url=LOGIN_URL)
def remove_from_cart(request: HttpRequest, product_id: int):
    _flash(request, cart_actions.remove_from_cart(request, product_id))
    return redirect("ecommerce:view_cart")


# ---- Checkout ------------------------------------------------------------------

def _checkout_state(session) -> dict:
    """
    Session-backed checkout state, created if missing.
    Structure: {"coupons": [{code, discount_type, discount_value}], "reward": {...} | None}
    """
    state = session.get(CHECKOUT_SESSION_KEY)
    if state is None:
        state = {"coupons": [], "reward": None}
        session[CHECKOUT_SESSION_KEY] = state
    return state


def _checkout_totals(request: HttpRequest):
    res = cart_actions.get_cart(request)
    if not res.ok:
        messages.error(request, res.error)
    state = _checkout_state(request.session)
    reward = state.get("reward") or {}
    return pricing.compute_totals(_as_list(res.data), state["coupons"], reward.get("discount")), state


def _render_checkout(request: HttpRequest, form=None, status: int = 200):
    totals, state = _checkout_totals(request)
    points = reward_actions.get_reward_points(request)
    return render(request, "checkout.html", {
        "form": form or CheckoutForm(),
        "coupon_form": CouponCodeForm(),
        "reward_form": RewardForm(),
        "totals": totals,
        "coupons": state["coupons"],
        "reward": state.get("reward"),
        "available_points": points.data if points.ok else 0,
    }, status=status)


@login_required(login_url=LOGIN_URL)
def checkout(request: HttpRequest):
    """
    GET: billing form plus the price breakdown.
    POST: validate billing details, then place a cash order or start a wallet payment
    depending on ``payment_method`` in {"cash", "khalti", "esewa"}.
    """
    if request.method != "POST":
        return _render_checkout(request)

    form = CheckoutForm(request.POST)
    if not form.is_valid():
        return _render_checkout(request, form, status=400)

    totals, state = _checkout_totals(request)
    if not totals.lines:
        messages.error(request, "Your cart is empty. Please add items before placing an order.")
        return redirect("ecommerce:view_cart")

    reward_points = (state.get("reward") or {}).get("points")
    method = request.POST.get("payment_method", "cash")
    if method == "khalti":
        payload = pricing.wallet_payload(form.billing_details(), totals, state["coupons"], reward_points)
        res = payment_actions.init_khalti(request, payload)
        if res.ok and isinstance(res.data, dict) and res.data.get("payment_url"):
            return redirect(res.data["payment_url"])
        messages.error(request, res.error or "Something went wrong. Please try again.")
        return redirect("ecommerce:checkout")

    if method == "esewa":
        payload = pricing.wallet_payload(form.billing_details(), totals, state["coupons"], reward_points)
        res = payment_actions.init_esewa(request, payload)
        if res.ok and isinstance(res.data, dict):
            return render(request, "payments/esewa_redirect.html", {
                "action": settings.ESEWA_FORM_URL,
                "fields": res.data,
            })
        messages.error(request, res.error or "Something went wrong. Please try again.")
        return redirect("ecommerce:checkout")

    payload = pricing.order_payload(form.billing_details(), totals, state["coupons"], reward_points)
    res = order_actions.create_order(request, payload)
    if not _flash(request, res):
        return redirect("ecommerce:checkout")
    request.session.pop(CHECKOUT_SESSION_KEY, None)
    return redirect("ecommerce:order_placed")


@login_required(login_url=LOGIN_URL)
def order_placed(request: HttpRequest):
    return render(request, "order_placed.html")


@require_POST
@login_required(login_url=LOGIN_URL)
def apply_coupon(request: HttpRequest):
    form = CouponCodeForm(request.POST)
    code = form.data.get("code", "").strip()
    state = _checkout_state(request.session)

    error = pricing.coupon_code_error(code, state["coupons"])
    if error:
        messages.error(request, error)
        return redirect("ecommerce:checkout")

    res = coupon_actions.verify_coupon(request, code)
    if _flash(request, res):
        state["coupons"].append(pricing.AppliedCoupon.from_session(res.data).to_session())
        request.session.modified = True
    return redirect("ecommerce:checkout")


@require_POST
@login_required(login_url=LOGIN_URL)
def remove_coupon(request: HttpRequest, code: str):
    state = _checkout_state(request.session)
    state["coupons"] = [c for c in state["coupons"] if c.get("code") != code]
    request.session.modified = True
    messages.success(request, "Coupon removed.")
    return redirect("ecommerce:checkout")


@require_POST
@login_required(login_url=LOGIN_URL)
def apply_reward(request: HttpRequest):
    """Ask the backend what the points are worth against the current total."""
    form = RewardForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Enter points to redeem.")
        return redirect("ecommerce:checkout")

    totals, state = _checkout_totals(request)
    points = form.cleaned_data["points"]
    res = reward_actions.apply_reward_points(request, totals.total_before_reward, points)
    if _flash(request, res):
        data = res.data if isinstance(res.data, dict) else {}
        state["reward"] = {
            "points": points,
            "used_points": data.get("used_points", points),
            "discount": str(pricing.to_decimal(data.get("discount"))),
        }
        request.session.modified = True
    return redirect("ecommerce:checkout")


@require_POST
@login_required(login_url=LOGIN_URL)
def remove_reward(request: HttpRequest):
    state = _checkout_state(request.session)
    state["reward"] = None
    request.session.modified = True
    messages.success(request, "Reward points removed.")
    return redirect("ecommerce:checkout")


# ---- Payments ------------------------------------------------------------------

@login_required(login_url=LOGIN_URL)
def khalti_verify(request: HttpRequest):
    """Khalti return URL: confirm the payment with the backend."""
    pidx = request.GET.get("pidx")
    if not pidx:
        return redirect("ecommerce:payment_failure")
    params = {
        "pidx": pidx,
        "transaction_id": request.GET.get("transaction_id"),
        "purchase_order_id": request.GET.get("purchase_order_id"),
        "total_amount": request.GET.get("total_amount"),
    }
    res = payment_actions.verify_khalti(request, params)
    if res.ok and isinstance(res.data, dict) and res.data.get("success"):
        return redirect("ecommerce:payment_success")
    logger.info("Khalti verification rejected for pidx=%s", pidx)
    return redirect("ecommerce:payment_failure")


@login_required(login_url=LOGIN_URL)
def esewa_verify(request: HttpRequest):
    """eSewa return URL: ``data`` is base64-encoded JSON to pass on to the backend."""
    encoded = request.GET.get("data", "")
    try:
        payload = json.loads(base64.b64decode(encoded).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        logger.warning("Undecodable eSewa response: %r", encoded[:80])
        messages.error(request, "Invalid payment response.")
        return redirect("ecommerce:payment_failure")

    res = payment_actions.verify_esewa(request, payload)
    data = res.data if isinstance(res.data, dict) else {}
    if res.ok and data.get("success"):
        messages.success(request, res.msg)
        return redirect("ecommerce:payment_success")
    messages.error(request, data.get("message") or res.error or "Payment verification failed")
    return redirect("ecommerce:payment_failure")


@login_required(login_url=LOGIN_URL)
def payment_success(request: HttpRequest):
    """Wallet payment confirmed: empty the cart and forget the checkout state."""
    res = cart_actions.clear_cart(request)
    if not res.ok:
        logger.warning("Cart not cleared after payment: %s", res.error)
    request.session.pop(CHECKOUT_SESSION_KEY, None)
    return render(request, "payments/success.html")


def payment_failure(request: HttpRequest):
    return render(request, "payments/failure.html")


# ---- Wishlist ------------------------------------------------------------------

@login_required(login_url=LOGIN_URL)
def wishlist(request: HttpRequest):
    res = wishlist_actions.get_user_wishlist(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "wishlist.html", {"items": _as_list(res.data)})


@require_POST
@login_required(login_url=LOGIN_URL)
def add_to_wishlist(request: HttpRequest):
    product_id = request.POST.get("product_id", "").strip()
    if not product_id.isdigit():
        messages.error(request, "Invalid product.")
    else:
        _flash(request, wishlist_actions.create_wishlist_item(request, int(product_id)))
    return redirect(_get_next_url(request) or "ecommerce:wishlist")


@require_POST
@login_required(login_url=LOGIN_URL)
def remove_from_wishlist(request: HttpRequest, item_id: int):
    _flash(request, wishlist_actions.remove_wishlist_item(request, item_id))
    return redirect("ecommerce:wishlist")


@require_POST
@login_required(login_url=LOGIN_URL)
def move_to_cart(request: HttpRequest, item_id: int):
    """Add the wishlisted product to the cart, then drop it from the wishlist."""
    product_id = request.POST.get("product_id", "").strip()
    if not product_id.isdigit():
        messages.error(request, "Invalid product.")
        return redirect("ecommerce:wishlist")

    res = cart_actions.add_to_cart(request, int(product_id), 1, request.POST.get("size") or None)
    if not res.ok:
        messages.error(request, res.error)
        return redirect("ecommerce:wishlist")
    wishlist_actions.remove_wishlist_item(request, item_id)
    messages.success(request, "Moved to cart.")
    return redirect("ecommerce:wishlist")


# ---- Reviews -------------------------------------------------------------------

@require_POST
@login_required(login_url=LOGIN_URL)
def add_review(request: HttpRequest, pk: int):
    form = ReviewForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please provide a review and a rating between 1 and 5.")
    else:
        _flash(request, review_actions.create_product_review(
            request, pk, form.cleaned_data["rating"], form.cleaned_data["text"]))
    return redirect("ecommerce:product_detail", pk=pk)


@require_POST
@login_required(login_url=LOGIN_URL)
def delete_review(request: HttpRequest, pk: int, review_id: int):
    _flash(request, review_actions.delete_product_review(request, review_id))
    return redirect("ecommerce:product_detail", pk=pk)


@require_POST
@login_required(login_url=LOGIN_URL)
def add_reply(request: HttpRequest, pk: int, review_id: int):
    form = VendorReplyForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Reply cannot be empty")
    else:
        _flash(request, review_actions.create_vendor_reply(request, review_id, form.cleaned_data["reply"]))
    return redirect("ecommerce:product_detail", pk=pk)


@require_POST
@login_required(login_url=LOGIN_URL)
def update_reply(request: HttpRequest, pk: int, reply_id: int):
    form = VendorReplyForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Reply cannot be empty")
    else:
        _flash(request, review_actions.update_vendor_reply(request, reply_id, form.cleaned_data["reply"]))
    return redirect("ecommerce:product_detail", pk=pk)


@require_POST
@login_required(login_url=LOGIN_URL)
def delete_reply(request: HttpRequest, pk: int, reply_id: int):
    _flash(request, review_actions.delete_vendor_reply(request, reply_id))
    return redirect("ecommerce:product_detail", pk=pk)


@require_POST
@login_required(login_url=LOGIN_URL)
def add_vendor_review(request: HttpRequest, vendor_id: int):
    form = ReviewForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please provide a review and a rating between 1 and 5.")
    else:
        _flash(request, review_actions.create_vendor_review(
            request, vendor_id, form.cleaned_data["rating"], form.cleaned_data["text"]))
    return redirect("ecommerce:vendor_page", vendor_id=vendor_id)


@require_POST
@login_required(login_url=LOGIN_URL)
def delete_vendor_review(request: HttpRequest, vendor_id: int, review_id: int):
    _flash(request, review_actions.delete_vendor_review(request, review_id))
    return redirect("ecommerce:vendor_page", vendor_id=vendor_id)
