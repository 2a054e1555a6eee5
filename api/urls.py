# api/urls.py
from django.urls import path
from .views import (
    SearchAPIView, CategoryListAPIView, ReviewStatsAPIView,
    CartAPIView, CartItemAPIView,
    WishlistAPIView, WishlistItemAPIView,
    ProductReviewListCreateAPIView, ReviewReplyCreateAPIView, ReplyDetailAPIView,
)

app_name = "api"

urlpatterns = [
    # Catalog
    path("search/", SearchAPIView.as_view(), name="search"),
    path("categories/", CategoryListAPIView.as_view(), name="category-list"),
    path("review-stats/", ReviewStatsAPIView.as_view(), name="review-stats"),

    # Cart
    path("cart/", CartAPIView.as_view(), name="cart"),
    path("cart/<int:product_id>/", CartItemAPIView.as_view(), name="cart-item"),

    # Wishlist
    path("wishlist/", WishlistAPIView.as_view(), name="wishlist"),
    path("wishlist/<int:item_id>/", WishlistItemAPIView.as_view(), name="wishlist-item"),

    # Reviews & vendor replies
    path("products/<int:product_id>/reviews/", ProductReviewListCreateAPIView.as_view(),
         name="product-review-list"),
    path("reviews/<int:review_id>/replies/", ReviewReplyCreateAPIView.as_view(), name="review-reply-create"),
    path("replies/<int:reply_id>/", ReplyDetailAPIView.as_view(), name="reply-detail"),
]
