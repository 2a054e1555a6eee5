# marketplace_project/urls.py
from django.urls import include, path
from django.shortcuts import render

# --- Custom 403 handler (PermissionDenied) ---
def permission_denied_view(request, exception):
    return render(request, "403.html", status=403)

# Django looks for these names at module level in the *root* URLconf
handler403 = "marketplace_project.urls.permission_denied_view"

urlpatterns = [
    # Landing, about, contact, privacy and the public FAQ
    path("", include(("core.urls", "core"), namespace="core")),

    # Catalog, cart, checkout, payments, wishlist, reviews
    path("", include(("ecommerce.urls", "ecommerce"), namespace="ecommerce")),

    path("accounts/", include(("accounts.urls", "accounts"), namespace="accounts")),
    path("dashboard/", include(("dashboard.urls", "dashboard"), namespace="dashboard")),

    # JSON proxy endpoints
    path("api/", include(("api.urls", "api"), namespace="api")),
]
