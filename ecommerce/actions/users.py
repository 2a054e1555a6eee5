# ecommerce/actions/users.py
"""
Account actions. The backend owns users and issues JWTs; this client only keeps
the issued tokens (and the cached user) in the Django session.
"""
from __future__ import annotations

import logging
from typing import Optional

from functions.backend import (
    SESSION_ACCESS_TOKEN,
    SESSION_REFRESH_TOKEN,
    SESSION_USER,
    BackendClient,
    BackendError,
    clear_backend_auth,
    client_for_request,
    store_tokens,
)

from . import ActionResponse, call, decode, failure

logger = logging.getLogger(__name__)


def get_user(request) -> ActionResponse:
    return call(request, "get", "api/getuser/", msg="User fetched successfully",
                errors={401: "Unauthorized User"}, backend_message=True)


def update_user(request, user_id, values: dict) -> ActionResponse:
    res = call(request, "put", f"users/updateuser/{user_id}/", json=values, msg="User updated successfully",
               errors={400: "Invalid input"})
    if res.ok:
        request.session.pop(SESSION_USER, None)
    return res


def _login(request, path: str, email: str, password: str) -> ActionResponse:
    try:
        response = BackendClient().post(path, json={"email": email, "password": password})
    except BackendError as exc:
        return failure(exc, error="Login failed", backend_message=True)

    body = decode(response)
    if not isinstance(body, dict):
        body = {}
    access = body.get("access") or response.cookies.get("access_token")
    refresh = body.get("refresh") or response.cookies.get("refresh_token")
    if not access:
        logger.warning("Login at %s answered %s without an access token", path, response.status_code)
        return ActionResponse(error="Login failed", status=502)

    clear_backend_auth(request.session)
    store_tokens(request.session, access, refresh, response.cookies.get("csrftoken"))
    user = body.get("user")
    if isinstance(user, dict):
        request.session[SESSION_USER] = user
    return ActionResponse(data=user, status=response.status_code, msg="Logged in successfully!")


def login(request, email: str, password: str) -> ActionResponse:
    """Authenticate against the backend and keep its tokens in the session."""
    return _login(request, "api/login/", email, password)


def login_superadmin(request, email: str, password: str) -> ActionResponse:
    return _login(request, "api/loginsuperadmin/", email, password)


def sign_out(request) -> ActionResponse:
    """Tell the backend to drop its cookies; the session is cleared either way."""
    try:
        client_for_request(request).post("api/logout/", json={})
        result = ActionResponse(data=None, status=200, msg="Logged out")
    except BackendError as exc:
        logger.warning("Logout failed: %s", exc.status)
        result = ActionResponse(data=None, error="Logout failed", status=exc.status or 500)
    finally:
        clear_backend_auth(request.session)
    return result


def register_user(request, values: dict) -> ActionResponse:
    return call(request, "post", "users/register/", json=values,
                msg="Verification email sent. Please enter the OTP from the link provided in the email.",
                error="Registration failed", backend_message=True)


def verify_otp(request, token: str, otp_code: str) -> ActionResponse:
    res = call(request, "post", f"api/otp/{token}/", json={"otp_code": otp_code, "token": token},
               msg="Account verified", error="Verification failed. Please try again.", backend_message=True)
    if res.ok and isinstance(res.data, dict) and res.data.get("detail"):
        res.msg = res.data["detail"]
    return res


def resend_otp(request, token: str) -> ActionResponse:
    return call(request, "post", "users/resend-otp/", json={"token": token}, msg="New OTP sent successfully!",
                error="Failed to resend OTP. Please try again.", backend_message=True)


def forgot_password(request, email: str) -> ActionResponse:
    return call(request, "post", "api/forgot-password-token/", json={"email": email},
                msg="Reset URL is sent to your email", error="Failed to send reset link", backend_message=True)


def reset_password(request, token: str, password: str) -> ActionResponse:
    res = call(request, "put", f"api/reset-password/{token}/", json={"password": password},
               msg="Password reset successfully", error="Password reset failed", backend_message=True)
    if res.ok and isinstance(res.data, dict) and str(res.data.get("success", "true")).lower() != "true":
        return ActionResponse(error=res.data.get("message") or "Password reset failed", status=res.status)
    return res


def cached_user(request) -> Optional[dict]:
    """
    The backend user for this session: cached copy first, else api/getuser/.
    Returns None for anonymous sessions or when the backend rejects the tokens.
    """
    session = request.session
    user = session.get(SESSION_USER)
    if user:
        return user
    if not (session.get(SESSION_ACCESS_TOKEN) or session.get(SESSION_REFRESH_TOKEN)):
        return None
    res = get_user(request)
    if not res.ok or not isinstance(res.data, dict):
        return None
    session[SESSION_USER] = res.data
    return res.data
