# api/tests/test_serializers.py
from django.test import SimpleTestCase

from api.serializers import (
    CartItemSerializer,
    CartQuantitySerializer,
    ReplySerializer,
    ReviewSerializer,
    first_error,
)


class CartItemSerializerTests(SimpleTestCase):
    def test_defaults(self):
        s = CartItemSerializer(data={"product_id": 3})
        self.assertTrue(s.is_valid(), s.errors)
        self.assertEqual(s.validated_data["quantity"], 1)
        self.assertIsNone(s.validated_data["size"])

    def test_size_required_for_sized_products(self):
        s = CartItemSerializer(data={"product_id": 3, "has_sizes": True})
        self.assertFalse(s.is_valid())
        self.assertEqual(first_error(s.errors), "Please select a size.")

    def test_quantity_must_be_positive(self):
        self.assertFalse(CartQuantitySerializer(data={"quantity": 0}).is_valid())


class ReviewSerializerTests(SimpleTestCase):
    def test_valid_review_is_stripped(self):
        s = ReviewSerializer(data={"rating": 5, "comment": "  Great fit  "})
        self.assertTrue(s.is_valid(), s.errors)
        self.assertEqual(s.validated_data["comment"], "Great fit")

    def test_rating_bounds(self):
        s = ReviewSerializer(data={"rating": 0, "comment": "Meh"})
        self.assertFalse(s.is_valid())
        self.assertEqual(first_error(s.errors), "Rating must be at least 1")

    def test_blank_comment(self):
        s = ReviewSerializer(data={"rating": 4, "comment": "   "})
        self.assertFalse(s.is_valid())
        self.assertEqual(first_error(s.errors), "Please enter a review")

    def test_blank_reply(self):
        s = ReplySerializer(data={"reply": ""})
        self.assertFalse(s.is_valid())
        self.assertEqual(first_error(s.errors), "Reply cannot be empty")


class FirstErrorTests(SimpleTestCase):
    def test_flattens_nested_errors(self):
        self.assertEqual(first_error({"non_field_errors": ["boom"], "x": ["later"]}), "boom")
        self.assertEqual(first_error({"size": {"inner": ["deep"]}}), "deep")
