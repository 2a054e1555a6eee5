# dashboard/tests.py
from datetime import date, timedelta
from unittest import mock

from django.contrib.messages import get_messages
from django.test import TestCase, override_settings
from django.urls import reverse

from ecommerce.actions import ActionResponse

CUSTOMER = {"id": 7, "username": "bob_buyer", "email": "b@example.com", "role": "user"}
VENDOR = {"id": 8, "username": "alice_vendor", "email": "a@example.com", "role": "vendor"}
SUPERADMIN = {"id": 1, "username": "root", "email": "root@example.com", "role": "superadmin"}

CATEGORIES = [
    {"id": 1, "name": "Footwear", "subcategories": [{"id": 2, "name": "Running"}]},
    {"id": 3, "name": "Hats"},
]


def ok(data=None, msg="", status=200):
    return ActionResponse(data=data, status=status, msg=msg)


class BaseSetup(TestCase):
    """Signs the client in as ``role_user`` and patches actions on demand."""
    role_user = None

    def setUp(self):
        patcher = mock.patch("ecommerce.middleware.cached_user", side_effect=lambda request: self.role_user)
        patcher.start()
        self.addCleanup(patcher.stop)

    def patch(self, target, **kwargs):
        patcher = mock.patch(f"ecommerce.actions.{target}", **kwargs)
        mocked = patcher.start()
        self.addCleanup(patcher.stop)
        return mocked

    def messages(self, resp):
        return [str(m) for m in get_messages(resp.wsgi_request)]


# ---------------- Client ----------------

@override_settings(DASHBOARD_PAGE_SIZE=2)
class ClientDashboardTests(BaseSetup):
    role_user = CUSTOMER

    def test_profile_is_prefilled(self):
        self.patch("users.get_user", return_value=ok(dict(CUSTOMER, firstName="Bob", lastName="Buyer")))
        resp = self.client.get(reverse("dashboard:client_home"))
        self.assertEqual(resp.context["form"].initial["firstName"], "Bob")

    def test_profile_update(self):
        self.patch("users.get_user", return_value=ok(CUSTOMER))
        update = self.patch("users.update_user", return_value=ok(msg="User updated successfully"))
        resp = self.client.post(reverse("dashboard:client_home"), {
            "firstName": "Bob", "lastName": "Buyer", "email": "b@example.com", "username": "bob_buyer",
            "dateOfBirth": "1990-02-01",
        })

        self.assertRedirects(resp, reverse("dashboard:client_home"), fetch_redirect_response=False)
        user_id, payload = update.call_args.args[1:]
        self.assertEqual(user_id, 7)
        self.assertEqual(payload["dateOfBirth"], "1990-02-01")

    def test_orders_are_paginated_locally(self):
        self.patch("orders.fetch_orders", return_value=ok([{"id": i, "status": "Pending"} for i in range(5)]))
        resp = self.client.get(reverse("dashboard:client_orders"), {"page": "3"})
        self.assertEqual([o["id"] for o in resp.context["orders"]], [4])

    def test_refund_request(self):
        create = self.patch("refunds.create_refund_request", return_value=ok(msg="Refund requested"))
        url = reverse("dashboard:client_refund_request", args=[12])
        resp = self.client.post(url, {"product_id": "3", "reason": "Arrived with a torn sole"})

        self.assertRedirects(resp, reverse("dashboard:client_order_detail", args=[12]),
                             fetch_redirect_response=False)
        self.assertEqual(create.call_args.args[1:], (12, "3", "Arrived with a torn sole"))

    def test_short_refund_reason_is_rejected(self):
        create = self.patch("refunds.create_refund_request")
        resp = self.client.post(reverse("dashboard:client_refund_request", args=[12]),
                                {"product_id": "3", "reason": "broken"})
        self.assertIn("Please describe the reason in at least 10 characters.", self.messages(resp))
        create.assert_not_called()

    def test_receipt_download(self):
        self.patch("orders.download_receipt",
                   return_value=ok({"content": b"%PDF-1.4", "content_type": "application/pdf"}))
        resp = self.client.get(reverse("dashboard:client_receipt", args=[12]))

        self.assertEqual(resp["Content-Type"], "application/pdf")
        self.assertEqual(resp["Content-Disposition"], 'attachment; filename="receipt-12.pdf"')
        self.assertEqual(resp.content, b"%PDF-1.4")

    def test_order_received(self):
        mark = self.patch("orders.mark_order_received", return_value=ok(msg="Order marked as received"))
        self.client.post(reverse("dashboard:client_order_received", args=[12]))
        self.assertEqual(mark.call_args.args[1], 12)


# ---------------- Vendor ----------------

@override_settings(DASHBOARD_PAGE_SIZE=10)
class VendorDashboardTests(BaseSetup):
    role_user = VENDOR

    def test_sales_report_for_valid_range(self):
        self.patch("vendors.get_vendor_total_sales", return_value=ok({"total_sales": 1000}))
        report = self.patch("vendors.get_sales_report", return_value=ok({"orders": 4}))
        start = date(2026, 1, 1)

        resp = self.client.get(reverse("dashboard:vendor_home"),
                               {"start_date": start.isoformat(), "end_date": (start + timedelta(days=7)).isoformat()})

        self.assertEqual(resp.context["report"], {"orders": 4})
        self.assertEqual(report.call_args.args[1:], ("2026-01-01", "2026-01-08"))

    def test_sales_report_range_is_validated(self):
        self.patch("vendors.get_vendor_total_sales", return_value=ok({}))
        report = self.patch("vendors.get_sales_report")
        resp = self.client.get(reverse("dashboard:vendor_home"),
                               {"start_date": "2026-01-01", "end_date": "2026-06-01"})

        self.assertIsNone(resp.context["report"])
        self.assertFalse(resp.context["form"].is_valid())
        report.assert_not_called()

    def test_create_product_with_sizes(self):
        self.patch("categories.get_active_categories", return_value=ok(CATEGORIES))
        create = self.patch("products.create_product", return_value=ok(msg="Product created successfully"))
        resp = self.client.post(reverse("dashboard:vendor_product_create"), {
            "name": "Trail Shoe", "description": "Grippy", "category_id": "2",
            "originalPrice": "1200", "discountedPrice": "1000", "has_sizes": "on",
            "sizes-TOTAL_FORMS": "2", "sizes-INITIAL_FORMS": "0",
            "sizes-0-size": "41", "sizes-0-stock": "2",
            "sizes-1-size": "42", "sizes-1-stock": "5",
        })

        self.assertRedirects(resp, reverse("dashboard:vendor_products"), fetch_redirect_response=False)
        values, files = create.call_args.args[1:]
        self.assertEqual(values["totalStock"], "7")
        self.assertEqual(len(values["sizes[]"]), 2)
        self.assertEqual(files, {})

    def test_sized_product_needs_a_size(self):
        self.patch("categories.get_active_categories", return_value=ok(CATEGORIES))
        create = self.patch("products.create_product")
        resp = self.client.post(reverse("dashboard:vendor_product_create"), {
            "name": "Trail Shoe", "description": "Grippy", "category_id": "2",
            "originalPrice": "1200", "discountedPrice": "1000", "has_sizes": "on",
            "sizes-TOTAL_FORMS": "1", "sizes-INITIAL_FORMS": "0",
        })
        self.assertContains(resp, "Select at least one size")
        create.assert_not_called()

    def test_product_edit_form_is_prefilled(self):
        self.patch("categories.get_active_categories", return_value=ok(CATEGORIES))
        self.patch("products.get_product", return_value=ok({
            "id": 5, "name": "Cap", "category": {"id": 3}, "has_sizes": False, "discountedPrice": "250",
        }))
        resp = self.client.get(reverse("dashboard:vendor_product_update", args=[5]))
        self.assertEqual(resp.context["form"].initial["category_id"], "3")
        self.assertEqual(resp.context["title"], "Edit Product")

    def test_dispatch_sets_delivery_date(self):
        update = self.patch("vendors.update_vendor_order_status", return_value=ok(msg="Status updated"))
        resp = self.client.post(f"{reverse('dashboard:vendor_order_status', args=[4])}?page=2",
                                {"status": "Dispatched"})

        self.assertRedirects(resp, f"{reverse('dashboard:vendor_orders')}?page=2", fetch_redirect_response=False)
        order_id, status, delivery_date = update.call_args.args[1:]
        self.assertEqual((order_id, status), (4, "Dispatched"))
        self.assertIsNotNone(delivery_date)

    def test_other_statuses_have_no_delivery_date(self):
        update = self.patch("vendors.update_vendor_order_status", return_value=ok())
        self.client.post(reverse("dashboard:vendor_order_status", args=[4]), {"status": "Delivered"})
        self.assertIsNone(update.call_args.args[3])

    def test_received_orders_use_backend_pages(self):
        orders = self.patch("vendors.get_vendor_orders", return_value=ok({"count": 25, "results": [{"id": 1}]}))
        resp = self.client.get(reverse("dashboard:vendor_orders"), {"page": "2"})

        self.assertEqual(orders.call_args.args[1:], (2, 10))
        self.assertEqual(resp.context["total_pages"], 3)
        self.assertTrue(resp.context["has_previous"])
        self.assertTrue(resp.context["has_next"])

    def test_refund_decision(self):
        update = self.patch("refunds.update_refund_status", return_value=ok(msg="Refund updated"))
        self.client.post(reverse("dashboard:vendor_refund_update", args=[6]),
                         {"status": "approved", "admin_notes": "Sent back"})
        self.assertEqual(update.call_args.args[1:], (6, "approved", "Sent back"))

    def test_vendor_cannot_open_superadmin_pages(self):
        resp = self.client.get(reverse("dashboard:superadmin_coupons"))
        self.assertRedirects(resp, reverse("dashboard:vendor_home"), fetch_redirect_response=False)


# ---------------- Superadmin ----------------

class SuperadminDashboardTests(BaseSetup):
    role_user = SUPERADMIN

    def setUp(self):
        super().setUp()
        self.patch("categories.get_active_categories", return_value=ok(CATEGORIES))

    def test_category_table_expands_rows(self):
        resp = self.client.get(reverse("dashboard:superadmin_categories"), {"expand": "1"})
        rows = resp.context["rows"]

        self.assertEqual([r["category"]["id"] for r in rows], [1, 2, 3])
        self.assertEqual(rows[0]["toggle"], "")
        self.assertEqual(rows[2]["toggle"], "1,3")

    def test_category_filter(self):
        resp = self.client.get(reverse("dashboard:superadmin_categories"), {"q": "hat"})
        self.assertEqual([r["category"]["id"] for r in resp.context["rows"]], [3])

    def test_create_category(self):
        create = self.patch("categories.create_category", return_value=ok(msg="Category created"))
        resp = self.client.post(reverse("dashboard:superadmin_categories"), {"name": "Boots", "parent": "1"})

        self.assertRedirects(resp, reverse("dashboard:superadmin_categories"), fetch_redirect_response=False)
        self.assertEqual(create.call_args.args[1:], ({"name": "Boots", "parent": "1"}, {}))

    def test_edit_unknown_category(self):
        resp = self.client.get(reverse("dashboard:superadmin_category_edit", args=[99]))
        self.assertRedirects(resp, reverse("dashboard:superadmin_categories"), fetch_redirect_response=False)

    def test_create_coupon(self):
        self.patch("coupons.get_coupons", return_value=ok([]))
        create = self.patch("coupons.create_coupon", return_value=ok(msg="Coupon created successfully!"))
        self.client.post(reverse("dashboard:superadmin_coupons"), {
            "code": "SAVE10", "discount_type": "percent", "discount_value": "10",
            "usage_limit": "100", "expiry_date": "2026-12-31",
        })
        self.assertEqual(create.call_args.args[1]["code"], "SAVE10")

    def test_vendor_actions(self):
        approve = self.patch("vendors.approve_vendor", return_value=ok(msg="Vendor approved"))
        resp = self.client.post(reverse("dashboard:superadmin_vendor_action", args=[4, "approve"]))

        self.assertRedirects(resp, reverse("dashboard:superadmin_pending_vendors"), fetch_redirect_response=False)
        self.assertEqual(approve.call_args.args[1], 4)

    def test_unknown_action_is_forbidden(self):
        resp = self.client.post(reverse("dashboard:superadmin_vendor_action", args=[4, "promote"]))
        self.assertEqual(resp.status_code, 403)
        self.assertTemplateUsed(resp, "403.html")

    def test_mark_ad_paid(self):
        paid = self.patch("advertisements.update_ad_payment_status", return_value=ok(msg="Payment status updated"))
        resp = self.client.post(reverse("dashboard:superadmin_ad_action", args=[9, "paid"]))
        self.assertRedirects(resp, reverse("dashboard:superadmin_active_ads"), fetch_redirect_response=False)
        self.assertEqual(paid.call_args.args[1], 9)

    def test_faq_crud(self):
        self.patch("faqs.get_all_faqs", return_value=ok([{"id": 1, "question": "Q?", "answer": "A."}]))
        create = self.patch("faqs.create_faq", return_value=ok(msg="FAQ created successfully"))
        delete = self.patch("faqs.delete_faq", return_value=ok(msg="FAQ deleted successfully"))

        resp = self.client.get(reverse("dashboard:superadmin_faqs"))
        self.assertContains(resp, "Q?")
        self.client.post(reverse("dashboard:superadmin_faqs"), {"question": "Shipping?", "answer": "3 days."})
        self.client.post(reverse("dashboard:superadmin_faq_delete", args=[1]))

        self.assertEqual(create.call_args.args[1], {"question": "Shipping?", "answer": "3 days."})
        self.assertEqual(delete.call_args.args[1], 1)
