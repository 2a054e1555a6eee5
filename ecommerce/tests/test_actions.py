# ecommerce/tests/test_actions.py
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import RequestFactory, SimpleTestCase

from ecommerce.actions import ActionResponse, call, upload_files
from ecommerce.actions import cart as cart_actions
from ecommerce.actions import coupons as coupon_actions
from ecommerce.actions import refunds as refund_actions
from ecommerce.actions import reviews as review_actions
from ecommerce.actions import rewards as reward_actions
from ecommerce.actions import users as user_actions
from ecommerce.actions import wishlist as wishlist_actions
from functions.backend import (
    SESSION_ACCESS_TOKEN,
    SESSION_CSRF_TOKEN,
    SESSION_REFRESH_TOKEN,
    SESSION_USER,
    BackendError,
)

from .utils import make_response


class ActionTestCase(SimpleTestCase):
    """Patches the backend client every action builds from the request."""

    def setUp(self):
        self.request = RequestFactory().get("/")
        self.request.session = {}
        self.backend = mock.Mock()
        patcher = mock.patch("ecommerce.actions.client_for_request", return_value=self.backend)
        patcher.start()
        self.addCleanup(patcher.stop)


class CallTests(ActionTestCase):
    def test_success_unwraps_payload_and_keeps_default_message(self):
        self.backend.get.return_value = make_response(200, {"data": [{"id": 1}]})
        res = call(self.request, "get", "cart/", unwrap="data", msg="Cart fetched successfully")

        self.assertTrue(res.ok)
        self.assertEqual(res.data, [{"id": 1}])
        self.assertEqual(res.status, 200)
        self.assertEqual(res.msg, "Cart fetched successfully")

    def test_backend_message_overrides_default_message(self):
        self.backend.post.return_value = make_response(201, {"message": "Created"})
        res = call(self.request, "post", "faqs/create/", json={}, msg="FAQ created successfully")
        self.assertEqual(res.msg, "Created")

    def test_unwrap_falls_back_through_keys_then_whole_body(self):
        self.backend.get.return_value = make_response(200, {"results": [1, 2]})
        self.assertEqual(call(self.request, "get", "x/", unwrap=("data", "results")).data, [1, 2])

        self.backend.get.return_value = make_response(200, {"count": 0})
        self.assertEqual(call(self.request, "get", "x/", unwrap="data").data, {"count": 0})

    def test_empty_body_decodes_to_empty_dict(self):
        self.backend.delete.return_value = make_response(204)
        self.assertEqual(call(self.request, "delete", "faqs/delete/1/").data, {})

    def test_failure_uses_generic_error(self):
        self.backend.get.side_effect = BackendError("boom", 500, {"error": "db down"})
        res = call(self.request, "get", "faqs/all/", error="Failed to fetch FAQs")

        self.assertFalse(res.ok)
        self.assertIsNone(res.data)
        self.assertEqual(res.status, 500)
        self.assertEqual(res.error, "Failed to fetch FAQs")

    def test_failure_status_override(self):
        self.backend.get.side_effect = BackendError("nope", 401)
        res = call(self.request, "get", "api/getuser/", errors={401: "Unauthorized User"})
        self.assertEqual(res.error, "Unauthorized User")
        self.assertEqual(res.status, 401)

    def test_failure_prefers_backend_message_over_generic_error(self):
        self.backend.post.side_effect = BackendError("bad", 400, {"error": "Out of stock"})
        res = call(self.request, "post", "cart/", error="Something went wrong", backend_message=True)
        self.assertEqual(res.error, "Out of stock")

    def test_status_override_wins_over_backend_message(self):
        self.backend.get.side_effect = BackendError("nope", 401, {"error": "Token is invalid"})
        res = call(self.request, "get", "api/getuser/", errors={401: "Unauthorized User"}, backend_message=True)
        self.assertEqual(res.error, "Unauthorized User")

    def test_backend_message_falls_through_to_generic_error_for_other_statuses(self):
        self.backend.get.side_effect = BackendError("nope", 500, {"detail": "Server error."})
        res = call(self.request, "get", "x/", error="Failed", errors={401: "Unauthorized User"}, backend_message=True)
        self.assertEqual(res.error, "Failed")

    def test_unreachable_backend_is_a_500(self):
        self.backend.get.side_effect = BackendError("refused")
        self.assertEqual(call(self.request, "get", "cart/").status, 500)

    def test_files_are_sent_as_upload_tuples(self):
        upload = SimpleUploadedFile("doc.pdf", b"%PDF", content_type="application/pdf")
        self.backend.post.return_value = make_response(201, {})
        call(self.request, "post", "vendors/createVendor/", data={"a": "b"}, files={"registrationDocument": upload})

        files = self.backend.post.call_args.kwargs["files"]
        self.assertEqual(files["registrationDocument"], ("doc.pdf", upload, "application/pdf"))

    def test_envelope_as_dict(self):
        res = ActionResponse(data={"id": 1}, status=200, msg="ok")
        self.assertEqual(res.as_dict(), {"data": {"id": 1}, "error": None, "status": 200, "msg": "ok"})


class UploadFilesTests(SimpleTestCase):
    def test_skips_empty_entries(self):
        image = SimpleUploadedFile("a.png", b"x", content_type="image/png")
        self.assertEqual(upload_files({"image": image, "topImage": None}), {"image": ("a.png", image, "image/png")})


class CartActionTests(ActionTestCase):
    def test_add_to_cart_sends_size_only_when_given(self):
        self.backend.post.return_value = make_response(201, {"message": "Item added"})
        cart_actions.add_to_cart(self.request, 5, 2)
        self.assertEqual(self.backend.post.call_args.kwargs["json"],
                         {"productID": 5, "product_type": "product", "quantity": 2})

        cart_actions.add_to_cart(self.request, 5, 1, "M")
        self.assertEqual(self.backend.post.call_args.kwargs["json"]["size"], "M")

    def test_add_to_cart_flags_duplicate_items(self):
        self.backend.post.return_value = make_response(200, {"message": "Item Exits"})
        res = cart_actions.add_to_cart(self.request, 5)

        self.assertTrue(res.ok)
        self.assertTrue(res.data["already_in_cart"])
        self.assertEqual(res.msg, "This item is already in your cart.")

    def test_update_quantity_overrides_backend_quantity(self):
        self.backend.put.return_value = make_response(200, {})
        cart_actions.update_cart_quantity(self.request, 5, 3, "L")
        self.assertEqual(self.backend.put.call_args.kwargs["json"],
                         {"productID": 5, "quantity": 3, "overide_quantity": True, "size": "L"})

    def test_clear_cart(self):
        self.backend.post.return_value = make_response(200, {})
        res = cart_actions.clear_cart(self.request)
        self.assertEqual(res.msg, "Cart cleared")
        self.backend.post.assert_called_once_with("cart/", json={"clear": True})


class CouponActionTests(SimpleTestCase):
    def setUp(self):
        self.request = RequestFactory().post("/")
        self.request.session = {}
        self.backend = mock.Mock()
        patcher = mock.patch("ecommerce.actions.coupons.client_for_request", return_value=self.backend)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_verify_coupon_returns_discount(self):
        self.backend.post.return_value = make_response(200, {"discount_type": "percent", "discount_value": "10.00"})
        res = coupon_actions.verify_coupon(self.request, "SAVE10")
        self.assertEqual(res.data, {"code": "SAVE10", "discount_type": "percent", "discount_value": "10.00"})

    def test_verify_coupon_error_texts(self):
        cases = [
            (BackendError("x", 400, {"message": "used_coupon"}), "You have already used this coupon."),
            (BackendError("x", 400, {"message": "expired"}), "Exceeded Limit or Expired"),
            (BackendError("x", 404), "Invalid coupon code."),
            (BackendError("x", 500), "Something went wrong"),
        ]
        for exc, expected in cases:
            with self.subTest(expected=expected):
                self.backend.post.side_effect = exc
                self.assertEqual(coupon_actions.verify_coupon(self.request, "SAVE10").error, expected)


class RewardAndReviewActionTests(ActionTestCase):
    def test_reward_points_are_unwrapped(self):
        self.backend.get.return_value = make_response(200, {"availablePoints": 120})
        self.assertEqual(reward_actions.get_reward_points(self.request).data, 120)

    def test_apply_reward_points_sends_total_as_string(self):
        self.backend.post.return_value = make_response(200, {"used_points": 50, "discount": 50})
        reward_actions.apply_reward_points(self.request, "1985.45", 50)
        self.assertEqual(self.backend.post.call_args.kwargs["json"],
                         {"order_total": "1985.45", "appliedReward": 50})

    def test_batch_stats_skip_backend_without_ids(self):
        res = review_actions.get_batch_product_review_stats(self.request, [None])
        self.assertEqual(res.data, {})
        self.backend.get.assert_not_called()

    def test_review_400_uses_login_prompt_over_drf_detail(self):
        self.backend.post.side_effect = BackendError("bad", 400, {"detail": "Invalid data."})
        res = review_actions.create_product_review(self.request, 3, 5, "Great")
        self.assertEqual(res.error, "Please login to review the product")


class StatusMessageTests(ActionTestCase):
    def test_wishlist_missing_product(self):
        self.backend.post.side_effect = BackendError("x", 404, {"detail": "Not found."})
        res = wishlist_actions.create_wishlist_item(self.request, 99)
        self.assertEqual(res.error, "Product not found")
        self.assertEqual(res.status, 404)

    def test_wishlist_other_failure_keeps_backend_error(self):
        self.backend.post.side_effect = BackendError("x", 400, {"error": "Already in wishlist"})
        self.assertEqual(wishlist_actions.create_wishlist_item(self.request, 3).error, "Already in wishlist")

    def test_refund_status_forbidden(self):
        self.backend.put.side_effect = BackendError(
            "x", 403, {"detail": "You do not have permission to perform this action."})
        res = refund_actions.update_refund_status(self.request, 5, "approved")
        self.assertEqual(res.error, "Permission denied")
        self.assertEqual(res.status, 403)

class UserActionTests(SimpleTestCase):
    def setUp(self):
        self.request = RequestFactory().post("/")
        self.request.session = {}

    @mock.patch("ecommerce.actions.users.BackendClient")
    def test_login_stores_tokens_and_user(self, client_cls):
        client_cls.return_value.post.return_value = make_response(
            200,
            {"access": "a1", "refresh": "r1", "user": {"id": 7, "role": "user"}},
            cookies={"csrftoken": "c1"},
        )
        self.request.session[SESSION_USER] = {"id": 99}

        res = user_actions.login(self.request, "b@example.com", "Secret!1")

        self.assertTrue(res.ok)
        self.assertEqual(res.data, {"id": 7, "role": "user"})
        self.assertEqual(self.request.session[SESSION_ACCESS_TOKEN], "a1")
        self.assertEqual(self.request.session[SESSION_REFRESH_TOKEN], "r1")
        self.assertEqual(self.request.session[SESSION_CSRF_TOKEN], "c1")
        self.assertEqual(self.request.session[SESSION_USER], {"id": 7, "role": "user"})
        client_cls.return_value.post.assert_called_once_with(
            "api/login/", json={"email": "b@example.com", "password": "Secret!1"}
        )

    @mock.patch("ecommerce.actions.users.BackendClient")
    def test_login_reads_tokens_from_cookies(self, client_cls):
        client_cls.return_value.post.return_value = make_response(
            200, {"user": {"id": 1, "role": "superadmin"}}, cookies={"access_token": "ca", "refresh_token": "cr"}
        )
        res = user_actions.login_superadmin(self.request, "root@example.com", "Secret!1")

        self.assertTrue(res.ok)
        self.assertEqual(self.request.session[SESSION_ACCESS_TOKEN], "ca")
        self.assertEqual(client_cls.return_value.post.call_args.args, ("api/loginsuperadmin/",))

    @mock.patch("ecommerce.actions.users.BackendClient")
    def test_login_failure_uses_backend_message(self, client_cls):
        client_cls.return_value.post.side_effect = BackendError("x", 401, {"message": "Invalid credentials"})
        res = user_actions.login(self.request, "b@example.com", "wrong-pass")

        self.assertEqual(res.error, "Invalid credentials")
        self.assertNotIn(SESSION_ACCESS_TOKEN, self.request.session)

    @mock.patch("ecommerce.actions.users.BackendClient")
    def test_login_without_token_fails(self, client_cls):
        client_cls.return_value.post.return_value = make_response(200, {"user": {"id": 1}})
        res = user_actions.login(self.request, "b@example.com", "Secret!1")
        self.assertEqual(res.error, "Login failed")

    @mock.patch("ecommerce.actions.users.client_for_request")
    def test_sign_out_clears_session_even_when_backend_fails(self, client_for):
        client_for.return_value.post.side_effect = BackendError("x", 500)
        self.request.session.update({SESSION_ACCESS_TOKEN: "a", SESSION_USER: {"id": 1}})

        res = user_actions.sign_out(self.request)

        self.assertFalse(res.ok)
        self.assertEqual(self.request.session, {})

    @mock.patch("ecommerce.actions.users.get_user")
    def test_cached_user_prefers_session_copy(self, get_user):
        self.request.session[SESSION_USER] = {"id": 7}
        self.assertEqual(user_actions.cached_user(self.request), {"id": 7})
        get_user.assert_not_called()

    @mock.patch("ecommerce.actions.users.get_user")
    def test_cached_user_is_none_without_tokens(self, get_user):
        self.assertIsNone(user_actions.cached_user(self.request))
        get_user.assert_not_called()

    @mock.patch("ecommerce.actions.users.get_user")
    def test_cached_user_fetches_and_caches(self, get_user):
        get_user.return_value = ActionResponse(data={"id": 7, "role": "vendor"}, status=200)
        self.request.session[SESSION_ACCESS_TOKEN] = "a"

        self.assertEqual(user_actions.cached_user(self.request), {"id": 7, "role": "vendor"})
        self.assertEqual(self.request.session[SESSION_USER], {"id": 7, "role": "vendor"})

    @mock.patch("ecommerce.actions.users.get_user")
    def test_cached_user_is_none_when_backend_rejects(self, get_user):
        get_user.return_value = ActionResponse(error="Unauthorized User", status=401)
        self.request.session[SESSION_ACCESS_TOKEN] = "a"
        self.assertIsNone(user_actions.cached_user(self.request))
