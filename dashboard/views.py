"""Role-gated dashboards: client (buyers), vendor and superadmin."""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required, user_passes_test
from django.core.exceptions import PermissionDenied
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_POST

from accounts.forms import UserProfileForm, VendorProfileForm
from ecommerce import catalog
from ecommerce.actions import advertisements as ad_actions
from ecommerce.actions import categories as category_actions
from ecommerce.actions import coupons as coupon_actions
from ecommerce.actions import faqs as faq_actions
from ecommerce.actions import orders as order_actions
from ecommerce.actions import products as product_actions
from ecommerce.actions import refunds as refund_actions
from ecommerce.actions import users as user_actions
from ecommerce.actions import vendors as vendor_actions
from ecommerce.forms import (
    AdvertisementForm,
    CategoryForm,
    CouponForm,
    FAQForm,
    ProductForm,
    ReceivedOrderStatusForm,
    RefundRequestForm,
    RefundStatusForm,
    SalesReportForm,
    SizeFormSet,
)

logger = logging.getLogger(__name__)

LOGIN_URL = "accounts:login"


# ---- Helpers ------------------------------------------------------------------

def _role_or_403(role: str):
    def check(user) -> bool:
        """Role check that raises 403 instead of redirecting when unauthorized."""
        if user.is_authenticated and getattr(user, "role", None) == role:
            return True
        raise PermissionDenied
    return check


_is_customer_or_403 = _role_or_403("user")
_is_vendor_or_403 = _role_or_403("vendor")
_is_superadmin_or_403 = _role_or_403("superadmin")


def _flash(request: HttpRequest, res) -> bool:
    if res.ok:
        if res.msg:
            messages.success(request, res.msg)
        return True
    messages.error(request, res.error)
    return False


def _list(res) -> list:
    data = res.data if res.ok else None
    if isinstance(data, dict):
        data = data.get("results") or data.get("data")
    return data if isinstance(data, list) else []


def _page_number(request: HttpRequest) -> int:
    try:
        return max(int(request.GET.get("page", 1)), 1)
    except (TypeError, ValueError):
        return 1


def _backend_page(request: HttpRequest, res) -> dict:
    """Context for lists the backend already paginates ({count, results})."""
    page = _page_number(request)
    count = res.data.get("count", 0) if res.ok and isinstance(res.data, dict) else 0
    total_pages = catalog.page_count(count, settings.DASHBOARD_PAGE_SIZE)
    return {
        "rows": _list(res),
        "page": page,
        "total_pages": total_pages,
        "has_previous": page > 1,
        "has_next": page < total_pages,
    }


def index(request: HttpRequest):
    """/dashboard/ goes to the signed-in user's own dashboard."""
    if not request.user.is_authenticated:
        return redirect(LOGIN_URL)
    if not getattr(request.user, "has_dashboard", False):
        raise PermissionDenied
    return redirect(request.user.dashboard_url)


# ---- Client dashboard ----------------------------------------------------------

@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_customer_or_403)
def client_home(request: HttpRequest):
    """Profile page; POST saves it through users/updateuser/."""
    res = user_actions.get_user(request)
    user = res.data if res.ok and isinstance(res.data, dict) else {}

    if request.method == "POST":
        form = UserProfileForm(request.POST)
        if form.is_valid():
            if _flash(request, user_actions.update_user(request, user.get("id"), form.payload())):
                return redirect("dashboard:client_home")
    else:
        form = UserProfileForm(initial=user)
    return render(request, "dashboard/client/profile.html", {"form": form, "profile": user})


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_customer_or_403)
def client_orders(request: HttpRequest):
    res = order_actions.fetch_orders(request)
    if not res.ok:
        messages.error(request, res.error)
    orders = catalog.paginate(_list(res), request.GET.get("page"), settings.DASHBOARD_PAGE_SIZE)
    return render(request, "dashboard/client/orders.html", {"page_obj": orders, "orders": orders.object_list})


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_customer_or_403)
def client_order_detail(request: HttpRequest, order_id: int):
    res = order_actions.fetch_order_details(request, order_id)
    if not res.ok:
        messages.error(request, res.error)
        return redirect("dashboard:client_orders")
    return render(request, "dashboard/client/order_detail.html", {
        "order": res.data,
        "refund_form": RefundRequestForm(),
    })


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_customer_or_403)
def client_order_received(request: HttpRequest, order_id: int):
    _flash(request, order_actions.mark_order_received(request, order_id))
    return redirect("dashboard:client_order_detail", order_id=order_id)


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_customer_or_403)
def client_refund_request(request: HttpRequest, order_id: int):
    form = RefundRequestForm(request.POST)
    if not form.is_valid():
        for errors in form.errors.values():
            messages.error(request, errors[0])
    else:
        _flash(request, refund_actions.create_refund_request(
            request, order_id, form.cleaned_data["product_id"], form.cleaned_data["reason"]))
    return redirect("dashboard:client_order_detail", order_id=order_id)


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_customer_or_403)
def client_receipt(request: HttpRequest, order_id: int):
    res = order_actions.download_receipt(request, order_id)
    if not res.ok:
        messages.error(request, res.error)
        return redirect("dashboard:client_order_detail", order_id=order_id)
    response = HttpResponse(res.data["content"], content_type=res.data["content_type"])
    response["Content-Disposition"] = f'attachment; filename="receipt-{order_id}.pdf"'
    return response


# ---- Vendor dashboard ----------------------------------------------------------

@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_home(request: HttpRequest):
    """Sales summary, plus a date-ranged report when start/end dates are given."""
    summary = vendor_actions.get_vendor_total_sales(request)
    if not summary.ok:
        messages.error(request, summary.error)

    report = None
    form = SalesReportForm(request.GET or None)
    if form.is_bound and form.is_valid():
        res = vendor_actions.get_sales_report(
            request,
            form.cleaned_data["start_date"].isoformat(),
            form.cleaned_data["end_date"].isoformat(),
        )
        if res.ok:
            report = res.data
        else:
            messages.error(request, res.error)
    return render(request, "dashboard/vendor/home.html", {
        "summary": summary.data if summary.ok else None,
        "report": report,
        "form": form,
    })


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_products(request: HttpRequest):
    res = product_actions.get_products_by_vendor(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/vendor/products.html", {"products": _list(res)})


def _categories(request: HttpRequest) -> list:
    res = category_actions.get_active_categories(request)
    return res.data if res.ok and isinstance(res.data, list) else []


def _product_form_page(request: HttpRequest, product: dict | None = None):
    """Create and edit share one page: ProductForm plus the size rows."""
    categories = _categories(request)
    if request.method == "POST":
        form = ProductForm(request.POST, request.FILES, categories=categories)
        has_sizes = request.POST.get("has_sizes") in ("on", "true", "True", "1")
        sizes = SizeFormSet(request.POST, prefix="sizes", has_sizes=has_sizes)
        if form.is_valid() and sizes.is_valid():
            values, files = form.payload(sizes.sizes())
            if product:
                res = product_actions.update_product(request, product.get("id"), values, files)
            else:
                res = product_actions.create_product(request, values, files)
            if _flash(request, res):
                return redirect("dashboard:vendor_products")
    else:
        initial = dict(product or {})
        if product:
            initial["category_id"] = str((product.get("category") or {}).get("id", product.get("category_id", "")))
        form = ProductForm(initial=initial, categories=categories)
        sizes = SizeFormSet(initial=(product or {}).get("sizes") or None, prefix="sizes",
                            has_sizes=bool((product or {}).get("has_sizes")))
    return render(request, "dashboard/vendor/product_form.html", {
        "form": form,
        "sizes": sizes,
        "title": "Edit Product" if product else "New Product",
    })


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_product_create(request: HttpRequest):
    return _product_form_page(request)


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_product_update(request: HttpRequest, pk: int):
    res = product_actions.get_product(request, pk)
    if not res.ok:
        messages.error(request, res.error)
        return redirect("dashboard:vendor_products")
    return _product_form_page(request, res.data)


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_product_delete(request: HttpRequest, pk: int):
    _flash(request, product_actions.delete_product(request, pk))
    return redirect("dashboard:vendor_products")


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_orders(request: HttpRequest):
    """Received orders, paginated by the backend."""
    res = vendor_actions.get_vendor_orders(request, _page_number(request), settings.DASHBOARD_PAGE_SIZE)
    if not res.ok:
        messages.error(request, res.error)
    ctx = _backend_page(request, res)
    ctx["status_form"] = ReceivedOrderStatusForm()
    return render(request, "dashboard/vendor/orders.html", ctx)


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_order_status(request: HttpRequest, order_id: int):
    form = ReceivedOrderStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Invalid status.")
    else:
        status = form.cleaned_data["status"]
        delivery_date = timezone.now().isoformat() if status == "Dispatched" else None
        _flash(request, vendor_actions.update_vendor_order_status(request, order_id, status, delivery_date))
    return redirect(f"{reverse('dashboard:vendor_orders')}?page={_page_number(request)}")


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_refunds(request: HttpRequest):
    res = refund_actions.get_refund_requests_by_vendor(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/vendor/refunds.html", {
        "refunds": _list(res),
        "form": RefundStatusForm(),
    })


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_refund_update(request: HttpRequest, refund_id: int):
    """Accept or decline a refund request."""
    form = RefundStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Invalid refund status.")
    else:
        _flash(request, refund_actions.update_refund_status(
            request, refund_id, form.cleaned_data["status"], form.cleaned_data.get("admin_notes")))
    return redirect("dashboard:vendor_refunds")


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_approved_refunds(request: HttpRequest):
    res = refund_actions.get_approved_refund_requests_by_vendor(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/vendor/approved_refunds.html", {
        "refunds": _list(res),
    })


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_ad_request(request: HttpRequest):
    if request.method == "POST":
        form = AdvertisementForm(request.POST, request.FILES)
        if form.is_valid():
            values, files = form.payload()
            if _flash(request, ad_actions.create_advertisement(request, values, files)):
                return redirect("dashboard:vendor_ads")
    else:
        form = AdvertisementForm()
    return render(request, "dashboard/vendor/ad_form.html", {"form": form})


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_ads(request: HttpRequest):
    res = vendor_actions.get_ads_by_vendor(request, _page_number(request), settings.DASHBOARD_PAGE_SIZE)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/vendor/ads.html", _backend_page(request, res))


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_vendor_or_403)
def vendor_profile(request: HttpRequest):
    if request.method == "POST":
        form = VendorProfileForm(request.POST)
        if form.is_valid():
            if _flash(request, vendor_actions.update_vendor_profile(request, form.cleaned_data)):
                return redirect("dashboard:vendor_profile")
        return render(request, "dashboard/vendor/profile.html", {"form": form})

    res = vendor_actions.get_vendor_profile(request)
    if not res.ok:
        messages.error(request, res.error)
    profile = res.data if res.ok and isinstance(res.data, dict) else {}
    return render(request, "dashboard/vendor/profile.html", {"form": VendorProfileForm(initial=profile),
                                                             "profile": profile})


# ---- Superadmin: categories ----------------------------------------------------

@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_home(request: HttpRequest):
    return redirect("dashboard:superadmin_categories")


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_categories(request: HttpRequest):
    """
    Category tree table. ``?expand=1,4`` lists the open rows, ``?q=`` filters.
    POST creates a category.
    """
    categories = _categories(request)
    if request.method == "POST":
        form = CategoryForm(request.POST, request.FILES, categories=categories)
        if form.is_valid():
            values, files = form.payload()
            if _flash(request, category_actions.create_category(request, values, files)):
                return redirect("dashboard:superadmin_categories")
    else:
        form = CategoryForm(categories=categories)

    expand = request.GET.get("expand", "")
    term = request.GET.get("q", "")
    rows = catalog.filter_categories(categories, term, catalog.parse_expanded(expand))
    for row in rows:
        row["toggle"] = catalog.toggle_expanded(expand, row["category"].get("id"))
    return render(request, "dashboard/superadmin/categories.html", {
        "rows": rows,
        "form": form,
        "q": term,
        "expand": expand,
    })


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_category_edit(request: HttpRequest, category_id: int):
    categories = _categories(request)
    category = catalog.find_category(categories, category_id)
    if category is None:
        messages.error(request, "Category not found.")
        return redirect("dashboard:superadmin_categories")

    if request.method == "POST":
        form = CategoryForm(request.POST, request.FILES, categories=categories, exclude_id=category_id)
        if form.is_valid():
            values, files = form.payload()
            if _flash(request, category_actions.update_category(request, category_id, values, files)):
                return redirect("dashboard:superadmin_categories")
    else:
        parent = category.get("parent")
        if isinstance(parent, dict):
            parent = parent.get("id")
        form = CategoryForm(initial={"name": category.get("name"), "parent": str(parent or "")},
                            categories=categories, exclude_id=category_id)
    return render(request, "dashboard/superadmin/category_form.html", {"form": form, "category": category})


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_category_delete(request: HttpRequest, category_id: int):
    _flash(request, category_actions.delete_category(request, category_id))
    return redirect("dashboard:superadmin_categories")


# ---- Superadmin: coupons -------------------------------------------------------

@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_coupons(request: HttpRequest):
    if request.method == "POST":
        form = CouponForm(request.POST)
        if form.is_valid():
            if _flash(request, coupon_actions.create_coupon(request, form.payload())):
                return redirect("dashboard:superadmin_coupons")
    else:
        form = CouponForm()
    res = coupon_actions.get_coupons(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/superadmin/coupons.html", {
        "coupons": _list(res),
        "form": form,
    })


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_coupon_edit(request: HttpRequest, coupon_id: int):
    if request.method == "POST":
        form = CouponForm(request.POST)
        if form.is_valid():
            if _flash(request, coupon_actions.update_coupon(request, coupon_id, form.payload())):
                return redirect("dashboard:superadmin_coupons")
    else:
        res = coupon_actions.get_coupons(request)
        coupons = _list(res)
        coupon = next((c for c in coupons if c.get("id") == coupon_id), None)
        if coupon is None:
            messages.error(request, "Coupon not found.")
            return redirect("dashboard:superadmin_coupons")
        initial = dict(coupon)
        initial["expiry_date"] = (coupon.get("expiry_date") or "")[:10]
        form = CouponForm(initial=initial)
    return render(request, "dashboard/superadmin/coupon_form.html", {"form": form, "coupon_id": coupon_id})


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_coupon_delete(request: HttpRequest, coupon_id: int):
    _flash(request, coupon_actions.delete_coupon(request, coupon_id))
    return redirect("dashboard:superadmin_coupons")


# ---- Superadmin: vendors -------------------------------------------------------

@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_pending_vendors(request: HttpRequest):
    res = vendor_actions.get_pending_vendors(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/superadmin/vendors.html", {
        "vendors": _list(res),
        "pending": True,
    })


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_approved_vendors(request: HttpRequest):
    res = vendor_actions.get_approved_vendors(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/superadmin/vendors.html", {
        "vendors": _list(res),
        "pending": False,
    })


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_vendor_action(request: HttpRequest, vendor_id: int, action: str):
    handlers = {
        "approve": (vendor_actions.approve_vendor, "dashboard:superadmin_pending_vendors"),
        "reject": (vendor_actions.reject_vendor, "dashboard:superadmin_pending_vendors"),
        "delete": (vendor_actions.delete_vendor, "dashboard:superadmin_approved_vendors"),
    }
    if action not in handlers:
        raise PermissionDenied
    handler, back = handlers[action]
    _flash(request, handler(request, vendor_id))
    return redirect(back)


# ---- Superadmin: advertisements ------------------------------------------------

@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_pending_ads(request: HttpRequest):
    res = ad_actions.get_pending_ads(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/superadmin/ads.html", {
        "ads": _list(res),
        "pending": True,
    })


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_active_ads(request: HttpRequest):
    res = ad_actions.get_active_ads(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/superadmin/ads.html", {
        "ads": _list(res),
        "pending": False,
    })


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_ad_action(request: HttpRequest, ad_id: int, action: str):
    handlers = {
        "approve": (ad_actions.approve_ad, "dashboard:superadmin_pending_ads"),
        "reject": (ad_actions.reject_ad, "dashboard:superadmin_pending_ads"),
        "paid": (ad_actions.update_ad_payment_status, "dashboard:superadmin_active_ads"),
    }
    if action not in handlers:
        raise PermissionDenied
    handler, back = handlers[action]
    _flash(request, handler(request, ad_id))
    return redirect(back)


# ---- Superadmin: FAQs ----------------------------------------------------------

@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_faqs(request: HttpRequest):
    if request.method == "POST":
        form = FAQForm(request.POST)
        if form.is_valid():
            if _flash(request, faq_actions.create_faq(request, form.cleaned_data)):
                return redirect("dashboard:superadmin_faqs")
    else:
        form = FAQForm()
    res = faq_actions.get_all_faqs(request)
    if not res.ok:
        messages.error(request, res.error)
    return render(request, "dashboard/superadmin/faqs.html", {
        "faqs": _list(res),
        "form": form,
    })


@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_faq_edit(request: HttpRequest, faq_id: int):
    if request.method == "POST":
        form = FAQForm(request.POST)
        if form.is_valid():
            if _flash(request, faq_actions.update_faq(request, faq_id, form.cleaned_data)):
                return redirect("dashboard:superadmin_faqs")
    else:
        res = faq_actions.get_faq(request, faq_id)
        if not res.ok:
            messages.error(request, res.error)
            return redirect("dashboard:superadmin_faqs")
        form = FAQForm(initial=res.data if isinstance(res.data, dict) else {})
    return render(request, "dashboard/superadmin/faq_form.html", {"form": form, "faq_id": faq_id})


@require_POST
@login_required(login_url=LOGIN_URL)
@user_passes_test(_is_superadmin_or_403)
def superadmin_faq_delete(request: HttpRequest, faq_id: int):
    _flash(request, faq_actions.delete_faq(request, faq_id))
    return redirect("dashboard:superadmin_faqs")
