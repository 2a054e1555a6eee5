# api/views.py
from __future__ import annotations

import logging

from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from ecommerce.actions import ActionResponse
from ecommerce.actions import cart as cart_actions
from ecommerce.actions import categories as category_actions
from ecommerce.actions import reviews as review_actions
from ecommerce.actions import wishlist as wishlist_actions
from ecommerce.search import autocomplete
from .permissions import IsBackendAuthenticated, IsVendor
from .serializers import (
    CartItemSerializer,
    CartQuantitySerializer,
    ReplySerializer,
    ReviewSerializer,
    WishlistItemSerializer,
    first_error,
)

logger = logging.getLogger(__name__)

# ---------- helpers ----------

def envelope(res: ActionResponse) -> Response:
    """The action envelope as JSON, with its status as the HTTP status."""
    return Response(res.as_dict(), status=res.status or (200 if res.ok else 500))


def invalid(serializer) -> Response:
    return envelope(ActionResponse(error=first_error(serializer.errors), status=400))


class EnvelopeAPIView(APIView):
    """Validate input with ``serializer_class`` and hand it to an action."""
    serializer_class = None

    def validated(self, request):
        serializer = self.serializer_class(data=request.data)
        if serializer.is_valid():
            return serializer.validated_data, None
        return None, invalid(serializer)

# ---------- Catalog ----------

class SearchAPIView(APIView):
    """GET ?q=: cached autocomplete; short queries answer an empty list."""
    permission_classes = [AllowAny]

    def get(self, request):
        query = request.query_params.get("q", "")
        results = autocomplete(request, query)
        return envelope(ActionResponse(data=results, status=200, msg="Search results fetched successfully"))


class CategoryListAPIView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return envelope(category_actions.get_active_categories(request))


class ReviewStatsAPIView(APIView):
    """GET ?product_ids=1,2,3: rating summary per product."""
    permission_classes = [AllowAny]

    def get(self, request):
        raw = request.query_params.get("product_ids", "")
        ids = [int(p) for p in raw.split(",") if p.strip().isdigit()]
        return envelope(review_actions.get_batch_product_review_stats(request, ids))

# ---------- Cart ----------

class CartAPIView(EnvelopeAPIView):
    """GET: the backend cart • POST: add an item."""
    permission_classes = [IsBackendAuthenticated]
    serializer_class = CartItemSerializer

    def get(self, request):
        return envelope(cart_actions.get_cart(request))

    def post(self, request):
        data, error = self.validated(request)
        if error:
            return error
        return envelope(cart_actions.add_to_cart(request, data["product_id"], data["quantity"], data.get("size")))


class CartItemAPIView(EnvelopeAPIView):
    """PUT: set the quantity • DELETE: drop the product from the cart."""
    permission_classes = [IsBackendAuthenticated]
    serializer_class = CartQuantitySerializer

    def put(self, request, product_id: int):
        data, error = self.validated(request)
        if error:
            return error
        return envelope(cart_actions.update_cart_quantity(request, product_id, data["quantity"], data.get("size")))

    def delete(self, request, product_id: int):
        return envelope(cart_actions.remove_from_cart(request, product_id))

# ---------- Wishlist ----------

class WishlistAPIView(EnvelopeAPIView):
    permission_classes = [IsBackendAuthenticated]
    serializer_class = WishlistItemSerializer

    def get(self, request):
        return envelope(wishlist_actions.get_user_wishlist(request))

    def post(self, request):
        data, error = self.validated(request)
        if error:
            return error
        return envelope(wishlist_actions.create_wishlist_item(request, data["product_id"]))


class WishlistItemAPIView(APIView):
    permission_classes = [IsBackendAuthenticated]

    def delete(self, request, item_id: int):
        return envelope(wishlist_actions.remove_wishlist_item(request, item_id))

# ---------- Reviews ----------

class ProductReviewListCreateAPIView(EnvelopeAPIView):
    """GET: list reviews (public) • POST: signed-in users only."""
    serializer_class = ReviewSerializer

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsBackendAuthenticated()]
        return [AllowAny()]

    def get(self, request, product_id: int):
        return envelope(review_actions.get_product_reviews(request, product_id))

    def post(self, request, product_id: int):
        data, error = self.validated(request)
        if error:
            return error
        return envelope(review_actions.create_product_review(request, product_id, data["rating"], data["comment"]))


class ReviewReplyCreateAPIView(EnvelopeAPIView):
    """POST: a vendor answers a review on one of their products."""
    permission_classes = [IsBackendAuthenticated, IsVendor]
    serializer_class = ReplySerializer

    def post(self, request, review_id: int):
        data, error = self.validated(request)
        if error:
            return error
        return envelope(review_actions.create_vendor_reply(request, review_id, data["reply"]))


class ReplyDetailAPIView(EnvelopeAPIView):
    """PUT: edit a reply • DELETE: remove it. Vendors only."""
    permission_classes = [IsBackendAuthenticated, IsVendor]
    serializer_class = ReplySerializer

    def put(self, request, reply_id: int):
        data, error = self.validated(request)
        if error:
            return error
        return envelope(review_actions.update_vendor_reply(request, reply_id, data["reply"]))

    def delete(self, request, reply_id: int):
        return envelope(review_actions.delete_vendor_reply(request, reply_id))
