# functions/backend.py
from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

TOKEN_REFRESH_PATH = "api/token/refresh/"

SESSION_ACCESS_TOKEN = "access_token"
SESSION_REFRESH_TOKEN = "refresh_token"
SESSION_CSRF_TOKEN = "backend_csrftoken"
SESSION_USER = "backend_user"
SESSION_AUTH_KEYS = (SESSION_ACCESS_TOKEN, SESSION_REFRESH_TOKEN, SESSION_CSRF_TOKEN, SESSION_USER)


class BackendError(Exception):
    """
    Raised for any failed backend call.
    - status: HTTP status, or None when the backend was unreachable.
    - payload: decoded JSON body ({} when the body was not JSON).
    """

    def __init__(self, message: str, status: Optional[int] = None, payload: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload if isinstance(payload, dict) else {}

    def backend_message(self) -> Optional[str]:
        """First human-readable message the backend put in its error body."""
        for key in ("error", "message"):
            value = self.payload.get(key)
            if isinstance(value, str) and value:
                return value
        details = self.payload.get("details")
        if isinstance(details, list) and details:
            return str(details[0])
        return None


def _decode(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


class BackendClient:
    """
    Thin HTTP client for the marketplace backend:
    - Sends the bearer token and CSRF header the backend expects.
    - On a first 401, refreshes the access token once and retries.
    - Raises BackendError for transport failures and 4xx/5xx answers.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        csrf_token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or settings.BACKEND_URL).rstrip("/") + "/"
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.csrf_token = csrf_token
        self.timeout = timeout if timeout is not None else settings.BACKEND_TIMEOUT
        self.http = session or requests.Session()
        self.tokens_rotated = False
        self.tokens_revoked = False

    def url(self, path: str) -> str:
        return self.base_url + path.lstrip("/")

    def _headers(self) -> dict:
        headers = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if self.csrf_token:
            headers["X-CSRFToken"] = self.csrf_token
        return headers

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return self.http.request(
                method.upper(),
                self.url(path),
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.warning("Backend %s %s unreachable: %s", method.upper(), path, exc)
            raise BackendError(str(exc) or "Backend unreachable") from exc

    def refresh(self) -> bool:
        """Exchange the refresh token for a new access token. Never raises."""
        if not self.refresh_token:
            return False
        try:
            r = self.http.post(
                self.url(TOKEN_REFRESH_PATH),
                json={"refresh": self.refresh_token},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Token refresh failed: %s", exc)
            return False
        if r.status_code != 200:
            logger.info("Token refresh rejected: %s", r.status_code)
            return False

        body = _decode(r)
        access = body.get("access") if isinstance(body, dict) else None
        if not access:
            logger.warning("Token refresh answered without an access token")
            return False
        self.access_token = access
        if body.get("refresh"):
            self.refresh_token = body["refresh"]
        self.tokens_rotated = True
        return True

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Any = None,
        data: Any = None,
        files: Any = None,
    ) -> requests.Response:
        kwargs = {"params": params, "json": json, "data": data, "files": files}
        response = self._send(method, path, **kwargs)

        if response.status_code == 401 and self.refresh_token:
            logger.info("Unauthorized %s %s, attempting token refresh", method.upper(), path)
            if self.refresh():
                response = self._send(method, path, **kwargs)
            else:
                self.tokens_revoked = True

        if response.status_code >= 400:
            payload = _decode(response)
            raise BackendError(
                f"Backend answered {response.status_code} for {method.upper()} {path}",
                status=response.status_code,
                payload=payload if isinstance(payload, dict) else {},
            )
        return response

    def get(self, path: str, **kwargs) -> requests.Response:
        return self.request("get", path, **kwargs)

    def post(self, path: str, **kwargs) -> requests.Response:
        return self.request("post", path, **kwargs)

    def put(self, path: str, **kwargs) -> requests.Response:
        return self.request("put", path, **kwargs)

    def patch(self, path: str, **kwargs) -> requests.Response:
        return self.request("patch", path, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        return self.request("delete", path, **kwargs)


# ----- Public API --------------------------------------------------------------

def clear_backend_auth(session) -> None:
    """Forget every backend token and the cached user."""
    for key in SESSION_AUTH_KEYS:
        session.pop(key, None)


def store_tokens(session, access: Optional[str], refresh: Optional[str] = None, csrf: Optional[str] = None) -> None:
    if access:
        session[SESSION_ACCESS_TOKEN] = access
    if refresh:
        session[SESSION_REFRESH_TOKEN] = refresh
    if csrf:
        session[SESSION_CSRF_TOKEN] = csrf


def client_for_request(request) -> BackendClient:
    """
    Build a client carrying the tokens held in the request's session.
    Anonymous requests (or ones without a session) get an unauthenticated client.
    """
    session = getattr(request, "session", None)
    if session is None:
        return _SessionBoundClient(None)
    return _SessionBoundClient(
        session,
        access_token=session.get(SESSION_ACCESS_TOKEN),
        refresh_token=session.get(SESSION_REFRESH_TOKEN),
        csrf_token=session.get(SESSION_CSRF_TOKEN),
    )


class _SessionBoundClient(BackendClient):
    """Writes rotated tokens back to the session; drops them once revoked."""

    def __init__(self, session, **kwargs) -> None:
        super().__init__(**kwargs)
        self._session = session

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return super().request(method, path, **kwargs)
        finally:
            if self._session is not None:
                if self.tokens_revoked:
                    clear_backend_auth(self._session)
                elif self.tokens_rotated:
                    store_tokens(self._session, self.access_token, self.refresh_token)


__all__ = [
    "BackendClient",
    "BackendError",
    "client_for_request",
    "clear_backend_auth",
    "store_tokens",
]
