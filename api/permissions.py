# api/permissions.py
from __future__ import annotations

from rest_framework.permissions import BasePermission, SAFE_METHODS


def _is_authenticated(user) -> bool:
    return bool(getattr(user, "is_authenticated", False))


def _has_role(user, role: str) -> bool:
    return _is_authenticated(user) and getattr(user, "role", None) == role


class IsBackendAuthenticated(BasePermission):
    """Session holds a backend login (request.user is a BackendUser)."""

    def has_permission(self, request, view) -> bool:
        return _is_authenticated(getattr(request, "user", None))


class IsVendor(BasePermission):
    def has_permission(self, request, view) -> bool:
        if request.method in SAFE_METHODS:
            return True
        return _has_role(getattr(request, "user", None), "vendor")
