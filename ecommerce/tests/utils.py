# ecommerce/tests/utils.py
import json
from unittest import mock

import requests

CUSTOMER = {"id": 7, "username": "bob_buyer", "email": "b@example.com", "role": "user"}
VENDOR = {"id": 8, "username": "alice_vendor", "email": "a@example.com", "role": "vendor"}
SUPERADMIN = {"id": 1, "username": "root", "email": "root@example.com", "role": "superadmin"}


def make_response(status=200, body=None, content=None, headers=None, cookies=None):
    """A real requests.Response carrying ``body`` as JSON."""
    response = requests.Response()
    response.status_code = status
    if content is None:
        content = json.dumps(body).encode("utf-8") if body is not None else b""
    response._content = content
    response.headers.update(headers or {})
    for name, value in (cookies or {}).items():
        response.cookies.set(name, value)
    return response


class BackendUserMixin:
    """
    Signs the test client in as a backend user by patching the session lookup
    the middleware relies on. ``self.backend_user`` is read on every request.
    """
    backend_user = None

    def setUp(self):
        super().setUp()
        patcher = mock.patch("ecommerce.middleware.cached_user", side_effect=lambda request: self.backend_user)
        patcher.start()
        self.addCleanup(patcher.stop)

    def login_as(self, payload):
        self.backend_user = payload
