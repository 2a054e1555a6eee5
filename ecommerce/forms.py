# ecommerce/forms.py
from __future__ import annotations

import json
from datetime import timedelta

from django import forms
from django.conf import settings
from django.core.validators import RegexValidator

from .actions.advertisements import AD_POSITIONS
from .actions.refunds import REFUND_STATUSES

MOBILE_VALIDATOR = RegexValidator(r"^\d{10}$", "Mobile number must be exactly 10 digits.")
MAX_REPORT_DAYS = 90


def validate_image(upload):
    """Optional image uploads: size cap plus an image/* content type."""
    if not upload:
        return upload
    if upload.size > settings.MAX_UPLOAD_SIZE:
        raise forms.ValidationError("Image must be smaller than 5MB.")
    content_type = getattr(upload, "content_type", "") or ""
    if not content_type.startswith("image/"):
        raise forms.ValidationError("Only image files are allowed.")
    return upload


def _iso(value):
    return value.isoformat() if value else None


# ---- Checkout ------------------------------------------------------------------

class CheckoutForm(forms.Form):
    name = forms.CharField(min_length=3, error_messages={
        "required": "Name is required and must be at least 3 characters.",
        "min_length": "Name is required and must be at least 3 characters.",
    })
    email = forms.EmailField(error_messages={
        "required": "Please enter a valid email address.",
        "invalid": "Please enter a valid email address.",
    })
    mobile = forms.CharField(validators=[MOBILE_VALIDATOR])
    address = forms.CharField(min_length=2, max_length=200, error_messages={
        "min_length": "Please enter a valid address.",
        "max_length": "Address cannot exceed 200 characters.",
    })
    city = forms.CharField(max_length=50, error_messages={
        "required": "City is required.",
        "max_length": "City name cannot exceed 50 characters.",
    })

    def billing_details(self) -> dict:
        return dict(self.cleaned_data)


class CouponCodeForm(forms.Form):
    """The code box on the checkout page."""
    code = forms.CharField(max_length=20, strip=True)


class RewardForm(forms.Form):
    points = forms.IntegerField(min_value=1, error_messages={"min_value": "Enter points to redeem."})


# ---- Coupons -------------------------------------------------------------------

class CouponForm(forms.Form):
    DISCOUNT_TYPES = [("percent", "Percent"), ("fixed", "Fixed")]

    code = forms.CharField(min_length=6, max_length=6, error_messages={
        "required": "Coupon code is required",
        "min_length": "Coupon code must be exactly 6 characters",
        "max_length": "Coupon code must be exactly 6 characters",
    })
    discount_type = forms.ChoiceField(choices=DISCOUNT_TYPES)
    discount_value = forms.DecimalField(min_value=0.01, decimal_places=2,
                                        error_messages={"min_value": "Must be greater than 0"})
    usage_limit = forms.IntegerField(min_value=1, error_messages={"min_value": "Must be at least 1"})
    expiry_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}))

    def payload(self) -> dict:
        data = self.cleaned_data
        return {
            "code": data["code"],
            "discount_type": data["discount_type"],
            "discount_value": float(data["discount_value"]),
            "usage_limit": data["usage_limit"],
            "expiry_date": _iso(data["expiry_date"]),
        }


# ---- Advertisements ------------------------------------------------------------

class AdvertisementForm(forms.Form):
    title = forms.CharField(error_messages={"required": "Title is required"})
    link = forms.URLField(error_messages={"invalid": "Must be a valid URL"})
    position = forms.ChoiceField(choices=[(p, p.replace("_", " ").title()) for p in AD_POSITIONS[:5]])
    start_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}),
                                 error_messages={"required": "Start date is required"})
    end_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}),
                               error_messages={"required": "End date is required"})
    description = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}),
                                  error_messages={"required": "Description is required"})
    image = forms.FileField(error_messages={"required": "Ad image is required"})

    def clean_image(self):
        return validate_image(self.cleaned_data.get("image"))

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start_date"), cleaned.get("end_date")
        if start and end and end < start:
            self.add_error("end_date", "End date must be after the start date.")
        return cleaned

    def payload(self) -> tuple[dict, dict]:
        data = self.cleaned_data
        values = {
            "title": data["title"],
            "link": data["link"],
            "position": data["position"],
            "startDate": _iso(data["start_date"]),
            "endDate": _iso(data["end_date"]),
            "description": data["description"],
        }
        return values, {"image": data["image"]}


# ---- Products ------------------------------------------------------------------

PRODUCT_IMAGE_FIELDS = ("image", "topImage", "bottomImage", "leftImage", "rightImage")


class ProductForm(forms.Form):
    name = forms.CharField(error_messages={"required": "Name is required"})
    description = forms.CharField(widget=forms.Textarea(attrs={"rows": 4}),
                                  error_messages={"required": "Description is required"})
    category_id = forms.ChoiceField(error_messages={"required": "Category is required"})
    originalPrice = forms.DecimalField(min_value=0, decimal_places=2)
    discountedPrice = forms.DecimalField(min_value=0, decimal_places=2)
    discountPercentage = forms.DecimalField(min_value=0, decimal_places=2, required=False, initial=0)
    totalStock = forms.IntegerField(min_value=0, required=False, initial=0)
    has_sizes = forms.BooleanField(required=False)
    isAvailable = forms.BooleanField(required=False, initial=True)
    image = forms.FileField(required=False)
    topImage = forms.FileField(required=False)
    bottomImage = forms.FileField(required=False)
    leftImage = forms.FileField(required=False)
    rightImage = forms.FileField(required=False)

    def __init__(self, *args, **kwargs):
        categories = kwargs.pop("categories", None) or []
        super().__init__(*args, **kwargs)
        # Leaf and parent categories both accept products.
        choices = [("", "Select a category")]
        for category in categories:
            choices.append((str(category.get("id")), category.get("name", "")))
            for sub in category.get("subcategories") or []:
                choices.append((str(sub.get("id")), f"-- {sub.get('name', '')}"))
        self.fields["category_id"].choices = choices

    def clean(self):
        cleaned = super().clean()
        for name in PRODUCT_IMAGE_FIELDS:
            if name in cleaned:
                try:
                    cleaned[name] = validate_image(cleaned.get(name))
                except forms.ValidationError as exc:
                    self.add_error(name, exc)
        return cleaned

    def payload(self, sizes: list | None = None) -> tuple[dict, dict]:
        """
        Multipart body for products/createProduct|updateProduct.
        With sizes, totalStock is their sum and each size goes out as a JSON
        string under ``sizes[]``.
        """
        data = self.cleaned_data
        has_sizes = bool(data.get("has_sizes"))
        sizes = sizes or []
        total_stock = sum(s["stock"] for s in sizes) if has_sizes else (data.get("totalStock") or 0)
        values = {
            "name": data["name"],
            "description": data["description"],
            "category_id": data["category_id"],
            "originalPrice": str(data["originalPrice"]),
            "discountedPrice": str(data["discountedPrice"]),
            "discountPercentage": str(data.get("discountPercentage") or 0),
            "totalStock": str(total_stock),
            "has_sizes": str(has_sizes).lower(),
            "isAvailable": str(bool(data.get("isAvailable"))).lower(),
        }
        if has_sizes:
            values["sizes[]"] = [json.dumps(s) for s in sizes]
        files = {name: data[name] for name in PRODUCT_IMAGE_FIELDS if data.get(name)}
        return values, files


class SizeForm(forms.Form):
    size = forms.CharField(error_messages={"required": "Size is required"})
    stock = forms.IntegerField(min_value=0)


class BaseSizeFormSet(forms.BaseFormSet):
    def __init__(self, *args, **kwargs):
        self.has_sizes = kwargs.pop("has_sizes", False)
        super().__init__(*args, **kwargs)

    def clean(self):
        super().clean()
        if any(self.errors) or not self.has_sizes:
            return
        if not self.sizes():
            raise forms.ValidationError("Select at least one size")

    def sizes(self) -> list:
        return [
            {"size": f.cleaned_data["size"], "stock": f.cleaned_data["stock"]}
            for f in self.forms
            if f.cleaned_data and not f.cleaned_data.get("DELETE") and f.cleaned_data.get("size")
        ]

    def full_clean(self):
        # Size rows are only validated for products that have sizes.
        if not self.has_sizes:
            self._errors = []
            self._non_form_errors = self.error_class()
            return
        super().full_clean()


SizeFormSet = forms.formset_factory(SizeForm, formset=BaseSizeFormSet, extra=1, can_delete=True)


# ---- Reviews -------------------------------------------------------------------

class ReviewForm(forms.Form):
    text = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}),
                           error_messages={"required": "Please enter a review"})
    rating = forms.IntegerField(
        min_value=1, max_value=5,
        widget=forms.NumberInput(attrs={"min": 1, "max": 5}),
        error_messages={
            "required": "Please select a rating",
            "min_value": "Rating must be at least 1",
            "max_value": "Rating must be at most 5",
        },
    )


class VendorReplyForm(forms.Form):
    reply = forms.CharField(widget=forms.Textarea(attrs={"rows": 2}),
                            error_messages={"required": "Reply cannot be empty"})


# ---- Superadmin ----------------------------------------------------------------

class CategoryForm(forms.Form):
    name = forms.CharField(max_length=100, error_messages={"required": "Category name is required"})
    parent = forms.ChoiceField(required=False)
    image = forms.FileField(required=False)

    def __init__(self, *args, **kwargs):
        categories = kwargs.pop("categories", None) or []
        exclude_id = kwargs.pop("exclude_id", None)
        super().__init__(*args, **kwargs)
        self.fields["parent"].choices = [("", "No parent")] + [
            (str(c.get("id")), c.get("name", "")) for c in categories if c.get("id") != exclude_id
        ]

    def clean_image(self):
        return validate_image(self.cleaned_data.get("image"))

    def payload(self) -> tuple[dict, dict]:
        data = self.cleaned_data
        values = {"name": data["name"], "parent": data.get("parent") or ""}
        files = {"image": data["image"]} if data.get("image") else {}
        return values, files


class FAQForm(forms.Form):
    question = forms.CharField(error_messages={"required": "Question is required"})
    answer = forms.CharField(widget=forms.Textarea(attrs={"rows": 4}),
                             error_messages={"required": "Answer is required"})


# ---- Vendor orders & refunds ---------------------------------------------------

class ReceivedOrderStatusForm(forms.Form):
    STATUSES = [("Pending", "Pending"), ("Dispatched", "Dispatched"), ("Delivered", "Delivered")]

    status = forms.ChoiceField(choices=STATUSES)


class RefundStatusForm(forms.Form):
    status = forms.ChoiceField(choices=[(s, s.title()) for s in REFUND_STATUSES])
    admin_notes = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 2}))


class RefundRequestForm(forms.Form):
    product_id = forms.CharField(widget=forms.HiddenInput)
    reason = forms.CharField(min_length=10, widget=forms.Textarea(attrs={"rows": 3}), error_messages={
        "required": "Please provide a reason for the refund.",
        "min_length": "Please describe the reason in at least 10 characters.",
    })


class SalesReportForm(forms.Form):
    start_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}))
    end_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}))

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start_date"), cleaned.get("end_date")
        if start and end:
            if end < start:
                raise forms.ValidationError("End date cannot be before start date.")
            if end - start < timedelta(days=1):
                raise forms.ValidationError("Select a range of at least one day.")
            if end - start > timedelta(days=MAX_REPORT_DAYS):
                raise forms.ValidationError(f"Date range cannot exceed {MAX_REPORT_DAYS} days.")
        return cleaned
