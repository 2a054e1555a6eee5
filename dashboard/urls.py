# dashboard/urls.py
from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    path('', views.index, name='index'),

    # client
    path('client/', views.client_home, name='client_home'),
    path('client/orders/', views.client_orders, name='client_orders'),
    path('client/orders/<int:order_id>/', views.client_order_detail, name='client_order_detail'),
    path('client/orders/<int:order_id>/received/', views.client_order_received, name='client_order_received'),
    path('client/orders/<int:order_id>/refund/', views.client_refund_request, name='client_refund_request'),
    path('client/orders/<int:order_id>/receipt/', views.client_receipt, name='client_receipt'),

    # vendor
    path('vendor/', views.vendor_home, name='vendor_home'),
    path('vendor/products/', views.vendor_products, name='vendor_products'),
    path('vendor/products/new/', views.vendor_product_create, name='vendor_product_create'),
    path('vendor/products/<int:pk>/edit/', views.vendor_product_update, name='vendor_product_update'),
    path('vendor/products/<int:pk>/delete/', views.vendor_product_delete, name='vendor_product_delete'),
    path('vendor/orders/', views.vendor_orders, name='vendor_orders'),
    path('vendor/orders/<int:order_id>/status/', views.vendor_order_status, name='vendor_order_status'),
    path('vendor/refunds/', views.vendor_refunds, name='vendor_refunds'),
    path('vendor/refunds/<int:refund_id>/', views.vendor_refund_update, name='vendor_refund_update'),
    path('vendor/refunds/approved/', views.vendor_approved_refunds, name='vendor_approved_refunds'),
    path('vendor/ads/', views.vendor_ads, name='vendor_ads'),
    path('vendor/ads/new/', views.vendor_ad_request, name='vendor_ad_request'),
    path('vendor/profile/', views.vendor_profile, name='vendor_profile'),

    # superadmin
    path('superadmin/', views.superadmin_home, name='superadmin_home'),
    path('superadmin/categories/', views.superadmin_categories, name='superadmin_categories'),
    path('superadmin/categories/<int:category_id>/edit/', views.superadmin_category_edit,
         name='superadmin_category_edit'),
    path('superadmin/categories/<int:category_id>/delete/', views.superadmin_category_delete,
         name='superadmin_category_delete'),
    path('superadmin/coupons/', views.superadmin_coupons, name='superadmin_coupons'),
    path('superadmin/coupons/<int:coupon_id>/edit/', views.superadmin_coupon_edit, name='superadmin_coupon_edit'),
    path('superadmin/coupons/<int:coupon_id>/delete/', views.superadmin_coupon_delete,
         name='superadmin_coupon_delete'),
    path('superadmin/vendors/pending/', views.superadmin_pending_vendors, name='superadmin_pending_vendors'),
    path('superadmin/vendors/approved/', views.superadmin_approved_vendors, name='superadmin_approved_vendors'),
    path('superadmin/vendors/<int:vendor_id>/<str:action>/', views.superadmin_vendor_action,
         name='superadmin_vendor_action'),
    path('superadmin/ads/pending/', views.superadmin_pending_ads, name='superadmin_pending_ads'),
    path('superadmin/ads/active/', views.superadmin_active_ads, name='superadmin_active_ads'),
    path('superadmin/ads/<int:ad_id>/<str:action>/', views.superadmin_ad_action, name='superadmin_ad_action'),
    path('superadmin/faqs/', views.superadmin_faqs, name='superadmin_faqs'),
    path('superadmin/faqs/<int:faq_id>/edit/', views.superadmin_faq_edit, name='superadmin_faq_edit'),
    path('superadmin/faqs/<int:faq_id>/delete/', views.superadmin_faq_delete, name='superadmin_faq_delete'),
]
