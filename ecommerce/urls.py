# ecommerce/urls.py
from django.urls import path
from . import views

app_name = 'ecommerce'

urlpatterns = [
    # Catalog
    path('products/', views.product_list, name='product_list'),
    path('products/<int:pk>/', views.product_detail, name='product_detail'),
    path('categories/', views.category_list, name='category_list'),
    path('categories/<slug:slug>/', views.category_products, name='category_products'),
    path('location/<str:location>/', views.location_products, name='location_products'),
    path('search/', views.search_results, name='search'),
    path('vendors/<int:vendor_id>/', views.vendor_page, name='vendor_page'),

    # Cart
    path('cart/', views.view_cart, name='view_cart'),
    path('cart/add/', views.add_to_cart, name='add_to_cart'),
    path('cart/<int:product_id>/increase/', views.increase_quantity, name='increase_quantity'),
    path('cart/<int:product_id>/decrease/', views.decrease_quantity, name='decrease_quantity'),
    path('cart/<int:product_id>/remove/', views.remove_from_cart, name='remove_from_cart'),

    # Checkout
    path('checkout/', views.checkout, name='checkout'),
    path('checkout/placed/', views.order_placed, name='order_placed'),
    path('checkout/coupon/', views.apply_coupon, name='apply_coupon'),
    path('checkout/coupon/<str:code>/remove/', views.remove_coupon, name='remove_coupon'),
    path('checkout/reward/', views.apply_reward, name='apply_reward'),
    path('checkout/reward/remove/', views.remove_reward, name='remove_reward'),

    # Payments
    path('payment/khalti/verify/', views.khalti_verify, name='khalti_verify'),
    path('payment/esewa/verify/', views.esewa_verify, name='esewa_verify'),
    path('payment/success/', views.payment_success, name='payment_success'),
    path('payment/failure/', views.payment_failure, name='payment_failure'),

    # Wishlist
    path('wishlist/', views.wishlist, name='wishlist'),
    path('wishlist/add/', views.add_to_wishlist, name='add_to_wishlist'),
    path('wishlist/<int:item_id>/remove/', views.remove_from_wishlist, name='remove_from_wishlist'),
    path('wishlist/<int:item_id>/move-to-cart/', views.move_to_cart, name='move_to_cart'),

    # Reviews
    path('products/<int:pk>/review/', views.add_review, name='add_review'),
    path('products/<int:pk>/reviews/<int:review_id>/delete/', views.delete_review, name='delete_review'),
    path('products/<int:pk>/reviews/<int:review_id>/reply/', views.add_reply, name='add_reply'),
    path('products/<int:pk>/replies/<int:reply_id>/edit/', views.update_reply, name='update_reply'),
    path('products/<int:pk>/replies/<int:reply_id>/delete/', views.delete_reply, name='delete_reply'),
    path('vendors/<int:vendor_id>/review/', views.add_vendor_review, name='add_vendor_review'),
    path('vendors/<int:vendor_id>/reviews/<int:review_id>/delete/', views.delete_vendor_review,
         name='delete_vendor_review'),
]
