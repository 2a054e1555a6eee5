# ecommerce/tests/test_pricing.py
from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from ecommerce import pricing

CART = [
    {"product": {"id": 1, "name": "Trail Shoe", "image": "/shoe.png", "originalPrice": "1200.00"},
     "price": "1000.00", "quantity": 2, "has_sizes": True, "selected_size": "42"},
    {"product": {"id": 2, "name": "Cap"}, "price": "250.50", "quantity": 1},
]

PERCENT_10 = {"code": "SAVE10", "discount_type": "percent", "discount_value": "10"}
FIXED_100 = {"code": "FLAT01", "discount_type": "fixed", "discount_value": "100"}


@override_settings(SHIPPING_FLAT="60")
class ComputeTotalsTests(SimpleTestCase):
    def test_subtotal_shipping_and_amount(self):
        totals = pricing.compute_totals(CART)

        self.assertEqual(totals.subtotal, Decimal("2250.50"))
        self.assertEqual(totals.shipping, Decimal("60.00"))
        self.assertEqual(totals.tax, Decimal("0.00"))
        self.assertEqual(totals.amount, Decimal("2310.50"))
        self.assertEqual(totals.total, Decimal("2310.50"))
        self.assertEqual([line.total for line in totals.lines], [Decimal("2000.00"), Decimal("250.50")])

    def test_percent_coupon_applies_to_subtotal_only(self):
        totals = pricing.compute_totals(CART, [PERCENT_10])
        self.assertEqual(totals.coupon_discount, Decimal("225.05"))
        self.assertEqual(totals.total, Decimal("2085.45"))

    def test_percentage_spelling_is_accepted(self):
        coupon = dict(PERCENT_10, discount_type="Percentage")
        self.assertEqual(pricing.compute_totals(CART, [coupon]).coupon_discount, Decimal("225.05"))

    def test_coupons_and_reward_stack(self):
        totals = pricing.compute_totals(CART, [PERCENT_10, FIXED_100], reward_discount="50")

        self.assertEqual(totals.coupon_discount, Decimal("325.05"))
        self.assertEqual(totals.total_before_reward, Decimal("1985.45"))
        self.assertEqual(totals.reward_discount, Decimal("50.00"))
        self.assertEqual(totals.total, Decimal("1935.45"))

    def test_total_never_goes_negative(self):
        huge = {"code": "HUGE01", "discount_type": "fixed", "discount_value": "99999"}
        totals = pricing.compute_totals(CART, [huge])
        self.assertEqual(totals.total, Decimal("0.00"))
        self.assertEqual(totals.total_before_reward, Decimal("0.00"))

    def test_unknown_coupon_type_is_worth_nothing(self):
        odd = {"code": "ODD001", "discount_type": "bogus", "discount_value": "10"}
        self.assertEqual(pricing.compute_totals(CART, [odd]).coupon_discount, Decimal("0.00"))

    def test_empty_cart_has_no_shipping(self):
        totals = pricing.compute_totals([])
        self.assertEqual(totals.shipping, Decimal("0.00"))
        self.assertEqual(totals.total, Decimal("0.00"))

    def test_bad_numbers_count_as_zero(self):
        totals = pricing.compute_totals([{"product": {"id": 3}, "price": "n/a", "quantity": "x"}])
        self.assertEqual(totals.subtotal, Decimal("0.00"))


class CouponCodeErrorTests(SimpleTestCase):
    def test_code_must_have_six_characters(self):
        self.assertEqual(pricing.coupon_code_error("ABC", []), "Enter 6 digit code")

    def test_code_cannot_be_applied_twice(self):
        self.assertEqual(pricing.coupon_code_error("SAVE10", [PERCENT_10]), "This coupon is already applied.")

    def test_fresh_code_passes(self):
        self.assertIsNone(pricing.coupon_code_error("SAVE20", [PERCENT_10]))


class AppliedCouponTests(SimpleTestCase):
    def test_session_round_trip_keeps_decimal_as_string(self):
        coupon = pricing.AppliedCoupon.from_session({"code": "SAVE10", "discount_type": "PERCENT",
                                                     "discount_value": 10})
        self.assertEqual(coupon.discount_type, "percent")
        self.assertEqual(coupon.to_session(), {"code": "SAVE10", "discount_type": "percent",
                                               "discount_value": "10"})


@override_settings(SHIPPING_FLAT="60")
class PayloadTests(SimpleTestCase):
    billing = {"name": "Bob Buyer", "email": "b@example.com", "mobile": "9800000000",
               "address": "Lakeside", "city": "Pokhara"}

    def test_order_payload(self):
        totals = pricing.compute_totals(CART, [PERCENT_10])
        payload = pricing.order_payload(self.billing, totals, [PERCENT_10], 30)

        self.assertEqual(payload["billing_details"], self.billing)
        self.assertEqual(payload["coupon_codes"], ["SAVE10"])
        self.assertEqual(payload["amount"], 2310.5)
        self.assertEqual(payload["total_amount"], 2085.45)
        self.assertEqual(payload["rewardPoints"], 30)
        self.assertEqual(payload["cart_items"][0], {
            "productID": 1,
            "productName": "Trail Shoe",
            "productImage": "/shoe.png",
            "quantity": 2,
            "price": 1200.0,
            "has_sizes": True,
            "selected_size": "42",
        })

    def test_wallet_payload_without_reward(self):
        totals = pricing.compute_totals(CART)
        payload = pricing.wallet_payload(self.billing, totals, [], None)

        self.assertEqual(payload["billingDetails"], self.billing)
        self.assertEqual(payload["totalAmount"], 2310.5)
        self.assertEqual(payload["rewardPoints"], "")
        self.assertEqual(len(payload["cart"]), 2)
