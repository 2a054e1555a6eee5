# ecommerce/tests/test_forms.py
import json
from datetime import date, timedelta

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings

from ecommerce.forms import (
    AdvertisementForm,
    CategoryForm,
    CheckoutForm,
    CouponForm,
    ProductForm,
    RefundRequestForm,
    ReviewForm,
    SalesReportForm,
    SizeFormSet,
)

CATEGORIES = [{"id": 3, "name": "Footwear", "subcategories": [{"id": 4, "name": "Running"}]}, {"id": 5, "name": "Hats"}]


def image(name="a.png", size=10, content_type="image/png"):
    return SimpleUploadedFile(name, b"x" * size, content_type=content_type)


class CheckoutFormTests(SimpleTestCase):
    data = {"name": "Bob Buyer", "email": "b@example.com", "mobile": "9800000000",
            "address": "Lakeside", "city": "Pokhara"}

    def test_valid_billing_details(self):
        form = CheckoutForm(self.data)
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.billing_details()["city"], "Pokhara")

    def test_mobile_must_be_ten_digits(self):
        form = CheckoutForm(dict(self.data, mobile="98000"))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["mobile"], ["Mobile number must be exactly 10 digits."])

    def test_short_name_is_rejected(self):
        form = CheckoutForm(dict(self.data, name="Bo"))
        self.assertIn("Name is required and must be at least 3 characters.", form.errors["name"])


class CouponFormTests(SimpleTestCase):
    def test_payload(self):
        form = CouponForm({"code": "SAVE10", "discount_type": "percent", "discount_value": "10",
                           "usage_limit": "5", "expiry_date": "2026-12-31"})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload(), {"code": "SAVE10", "discount_type": "percent", "discount_value": 10.0,
                                          "usage_limit": 5, "expiry_date": "2026-12-31"})

    def test_code_length(self):
        form = CouponForm({"code": "SAVE", "discount_type": "fixed", "discount_value": "10",
                           "usage_limit": "1", "expiry_date": "2026-12-31"})
        self.assertEqual(form.errors["code"], ["Coupon code must be exactly 6 characters"])


class AdvertisementFormTests(SimpleTestCase):
    def data(self, **overrides):
        data = {"title": "Summer sale", "link": "https://shop.example.com", "position": "homepage_middle",
                "start_date": "2026-06-01", "end_date": "2026-06-30", "description": "Big discounts"}
        data.update(overrides)
        return data

    def test_payload_splits_values_and_files(self):
        upload = image()
        form = AdvertisementForm(self.data(), {"image": upload})
        self.assertTrue(form.is_valid(), form.errors)
        values, files = form.payload()
        self.assertEqual(values["startDate"], "2026-06-01")
        self.assertEqual(values["endDate"], "2026-06-30")
        self.assertEqual(files, {"image": upload})

    def test_end_before_start(self):
        form = AdvertisementForm(self.data(end_date="2026-05-01"), {"image": image()})
        self.assertIn("End date must be after the start date.", form.errors["end_date"])

    def test_image_is_required_and_checked(self):
        self.assertEqual(AdvertisementForm(self.data()).errors["image"], ["Ad image is required"])
        form = AdvertisementForm(self.data(), {"image": image("a.pdf", content_type="application/pdf")})
        self.assertEqual(form.errors["image"], ["Only image files are allowed."])

    @override_settings(MAX_UPLOAD_SIZE=5)
    def test_image_size_cap(self):
        form = AdvertisementForm(self.data(), {"image": image(size=10)})
        self.assertEqual(form.errors["image"], ["Image must be smaller than 5MB."])


class ProductFormTests(SimpleTestCase):
    data = {"name": "Trail Shoe", "description": "Grippy", "category_id": "4",
            "originalPrice": "1200", "discountedPrice": "1000", "totalStock": "7"}

    def test_category_choices_include_subcategories(self):
        choices = dict(ProductForm(categories=CATEGORIES).fields["category_id"].choices)
        self.assertEqual(choices["4"], "-- Running")
        self.assertIn("5", choices)

    def test_payload_without_sizes(self):
        form = ProductForm(self.data, {"image": image()}, categories=CATEGORIES)
        self.assertTrue(form.is_valid(), form.errors)
        values, files = form.payload()
        self.assertEqual(values["totalStock"], "7")
        self.assertEqual(values["has_sizes"], "false")
        self.assertNotIn("sizes[]", values)
        self.assertEqual(list(files), ["image"])

    def test_payload_with_sizes_sums_stock(self):
        form = ProductForm(dict(self.data, has_sizes="on"), categories=CATEGORIES)
        self.assertTrue(form.is_valid(), form.errors)
        values, files = form.payload([{"size": "M", "stock": 2}, {"size": "L", "stock": 3}])

        self.assertEqual(values["totalStock"], "5")
        self.assertEqual(values["has_sizes"], "true")
        self.assertEqual([json.loads(s) for s in values["sizes[]"]],
                         [{"size": "M", "stock": 2}, {"size": "L", "stock": 3}])
        self.assertEqual(files, {})

    def test_unknown_category_is_rejected(self):
        form = ProductForm(dict(self.data, category_id="99"), categories=CATEGORIES)
        self.assertIn("category_id", form.errors)


class SizeFormSetTests(SimpleTestCase):
    def formset(self, rows, has_sizes=True):
        data = {"sizes-TOTAL_FORMS": str(len(rows)), "sizes-INITIAL_FORMS": "0"}
        for i, (size, stock) in enumerate(rows):
            data[f"sizes-{i}-size"] = size
            data[f"sizes-{i}-stock"] = stock
        return SizeFormSet(data, prefix="sizes", has_sizes=has_sizes)

    def test_collects_filled_rows(self):
        sizes = self.formset([("M", "2"), ("L", "3")])
        self.assertTrue(sizes.is_valid(), sizes.errors)
        self.assertEqual(sizes.sizes(), [{"size": "M", "stock": 2}, {"size": "L", "stock": 3}])

    def test_at_least_one_size_when_product_has_sizes(self):
        sizes = self.formset([("", "")])
        self.assertFalse(sizes.is_valid())
        self.assertEqual(sizes.non_form_errors(), ["Select at least one size"])

    def test_rows_ignored_without_sizes(self):
        self.assertTrue(self.formset([("", "")], has_sizes=False).is_valid())


class SalesReportFormTests(SimpleTestCase):
    def form(self, start, end):
        return SalesReportForm({"start_date": start.isoformat(), "end_date": end.isoformat()})

    def test_valid_range(self):
        start = date(2026, 1, 1)
        self.assertTrue(self.form(start, start + timedelta(days=30)).is_valid())

    def test_invalid_ranges(self):
        start = date(2026, 1, 1)
        cases = [
            (start - timedelta(days=1), "End date cannot be before start date."),
            (start, "Select a range of at least one day."),
            (start + timedelta(days=91), "Date range cannot exceed 90 days."),
        ]
        for end, message in cases:
            with self.subTest(message=message):
                form = self.form(start, end)
                self.assertFalse(form.is_valid())
                self.assertEqual(form.non_field_errors(), [message])


class SmallFormTests(SimpleTestCase):
    def test_review_rating_bounds(self):
        self.assertFalse(ReviewForm({"text": "Great", "rating": "6"}).is_valid())
        self.assertTrue(ReviewForm({"text": "Great", "rating": "5"}).is_valid())

    def test_refund_reason_min_length(self):
        form = RefundRequestForm({"product_id": "3", "reason": "broken"})
        self.assertEqual(form.errors["reason"], ["Please describe the reason in at least 10 characters."])

    def test_category_form_excludes_itself_as_parent(self):
        form = CategoryForm(categories=CATEGORIES, exclude_id=3)
        self.assertEqual([c[0] for c in form.fields["parent"].choices], ["", "5"])

    def test_category_payload(self):
        form = CategoryForm({"name": "Boots", "parent": "3"}, categories=CATEGORIES)
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload(), ({"name": "Boots", "parent": "3"}, {}))
