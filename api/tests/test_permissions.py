# api/tests/test_permissions.py
from types import SimpleNamespace

from django.test import SimpleTestCase
from rest_framework.test import APIRequestFactory

from api.permissions import IsBackendAuthenticated, IsVendor
from ecommerce.middleware import BackendUser


class PermissionTests(SimpleTestCase):
    def setUp(self):
        self.factory = APIRequestFactory()
        self.anon = SimpleNamespace(is_authenticated=False)
        self.customer = BackendUser({"id": 7, "role": "user"})
        self.vendor = BackendUser({"id": 8, "role": "vendor"})
        self.view = SimpleNamespace()

    def request(self, method, user):
        req = getattr(self.factory, method)("/api/x/")
        req.user = user
        return req

    # ---- IsBackendAuthenticated ----
    def test_authenticated_requires_backend_user(self):
        perm = IsBackendAuthenticated()
        self.assertFalse(perm.has_permission(self.request("get", self.anon), self.view))
        self.assertTrue(perm.has_permission(self.request("get", self.customer), self.view))

    # ---- IsVendor ----
    def test_isvendor_allows_safe_methods_to_anyone(self):
        self.assertTrue(IsVendor().has_permission(self.request("get", self.anon), self.view))

    def test_isvendor_denies_writes_for_other_roles(self):
        self.assertFalse(IsVendor().has_permission(self.request("post", self.customer), self.view))
        self.assertTrue(IsVendor().has_permission(self.request("post", self.vendor), self.view))

