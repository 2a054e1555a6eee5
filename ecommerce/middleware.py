# ecommerce/middleware.py
"""
Puts the backend user on ``request.user`` and gates the dashboards by role.

Django's auth decorators (login_required, user_passes_test) and DRF's
SessionAuthentication only need ``is_authenticated`` / ``is_active`` on the
user object, so a lightweight BackendUser is enough for both.
"""
from __future__ import annotations

import logging

from django.contrib.auth.models import AnonymousUser
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.functional import SimpleLazyObject

from .actions.users import cached_user

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_VENDOR = "vendor"
ROLE_SUPERADMIN = "superadmin"

DASHBOARD_FOR_ROLE = {
    ROLE_USER: "dashboard:client_home",
    ROLE_VENDOR: "dashboard:vendor_home",
    ROLE_SUPERADMIN: "dashboard:superadmin_home",
}

# URL prefix (relative to the dashboard root) owned by each role.
ROLE_PREFIXES = {
    ROLE_USER: "client/",
    ROLE_VENDOR: "vendor/",
    ROLE_SUPERADMIN: "superadmin/",
}


class BackendUser:
    """The ``api/getuser/`` payload dressed up as a Django user."""

    is_authenticated = True
    is_anonymous = False
    is_active = True
    is_staff = False

    def __init__(self, payload: dict) -> None:
        self.payload = payload
        self.id = payload.get("id")
        self.pk = self.id
        self.username = payload.get("username") or payload.get("email") or ""
        self.email = payload.get("email") or ""
        self.role = (payload.get("role") or ROLE_USER).lower()

    @property
    def is_superuser(self) -> bool:
        return self.role == ROLE_SUPERADMIN

    @property
    def is_vendor(self) -> bool:
        return self.role == ROLE_VENDOR

    @property
    def is_superadmin(self) -> bool:
        return self.role == ROLE_SUPERADMIN

    @property
    def is_customer(self) -> bool:
        return self.role == ROLE_USER

    @property
    def has_dashboard(self) -> bool:
        return self.role in DASHBOARD_FOR_ROLE

    @property
    def dashboard_url(self) -> str:
        return reverse(DASHBOARD_FOR_ROLE.get(self.role, DASHBOARD_FOR_ROLE[ROLE_USER]))

    def get_username(self) -> str:
        return self.username

    def __str__(self) -> str:
        return self.username

    def __eq__(self, other) -> bool:
        return isinstance(other, BackendUser) and other.id == self.id

    def __hash__(self) -> int:
        return hash(self.id)


def get_backend_user(request):
    payload = cached_user(request)
    if not payload:
        return AnonymousUser()
    return BackendUser(payload)


class BackendUserMiddleware:
    """
    - request.user: BackendUser when the session holds a valid backend login.
    - /dashboard/<role>/...: login required; other roles go to their own dashboard.
      Roles without a dashboard are left to the views.
    - login/register: already signed-in users go to their dashboard.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.user = SimpleLazyObject(lambda: get_backend_user(request))
        redirect_to = self._gate(request)
        if redirect_to:
            return redirect(redirect_to)
        return self.get_response(request)

    def _gate(self, request):
        path = request.path_info
        dashboard_root = reverse("dashboard:index")
        auth_pages = (reverse("accounts:login"), reverse("accounts:register"))

        if path.startswith(dashboard_root):
            user = request.user
            if not user.is_authenticated:
                return f"{reverse('accounts:login')}?next={path}"
            rest = path[len(dashboard_root):]
            for role, prefix in ROLE_PREFIXES.items():
                if rest.startswith(prefix) and user.role != role:
                    if not user.has_dashboard:
                        # no dashboard of its own; the view answers 403
                        return None
                    logger.info("Role %s tried %s, redirecting", user.role, path)
                    return user.dashboard_url
            return None

        if path in auth_pages and request.user.is_authenticated and request.user.has_dashboard:
            return request.user.dashboard_url
        return None
