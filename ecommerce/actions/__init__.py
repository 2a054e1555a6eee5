# ecommerce/actions/__init__.py
"""
Server actions: one function per backend endpoint.

Every action proxies a single request to the backend and reshapes the answer
into an ActionResponse. Actions never raise on backend failures; views decide
how to surface ``error`` (usually as a flash message).
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional, Union

from functions.backend import BackendError, client_for_request

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "An error occurred"


@dataclass
class ActionResponse:
    data: Any = None
    error: Optional[str] = None
    status: Optional[int] = None
    msg: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        return asdict(self)


def _unwrap(body: Any, unwrap: Union[str, Iterable[str], None]) -> Any:
    """
    Pull the payload out of the backend's body.
    ``unwrap`` is a key or a sequence of fallback keys; the whole body is
    returned when none of them is present.
    """
    if unwrap is None or not isinstance(body, dict):
        return body
    keys = (unwrap,) if isinstance(unwrap, str) else tuple(unwrap)
    for key in keys:
        value = body.get(key)
        if value is not None:
            return value
    return body


def decode(response) -> Any:
    if response.status_code == 204 or not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {}


def upload_files(files: dict) -> dict:
    """Django uploads as the (filename, fileobj, content_type) tuples requests expects."""
    return {
        name: (getattr(f, "name", name), f, getattr(f, "content_type", None))
        for name, f in files.items()
        if f
    }


def failure(exc: BackendError, *, error: str, errors: Optional[dict] = None,
            backend_message: bool = False) -> ActionResponse:
    """Map a BackendError to the envelope the UI understands."""
    status = exc.status or 500
    message = errors.get(status) if errors else None
    if not message and backend_message:
        message = exc.backend_message()
    return ActionResponse(data=None, error=message or error, status=status, msg="")


def call(
    request,
    method: str,
    path: str,
    *,
    unwrap: Union[str, Iterable[str], None] = None,
    msg: str = "",
    error: str = DEFAULT_ERROR,
    errors: Optional[dict] = None,
    backend_message: bool = False,
    **kwargs,
) -> ActionResponse:
    """
    Proxy one request to the backend.

    - unwrap: body key(s) holding the payload (e.g. "data", "results").
    - msg: success message; the backend's own "message" wins when present.
    - error / errors: generic failure text and per-status overrides.
    - backend_message: without a per-status override, the backend's own error
      text wins over the generic one.
    """
    if kwargs.get("files"):
        kwargs["files"] = upload_files(kwargs["files"])
    client = client_for_request(request)
    try:
        response = getattr(client, method.lower())(path, **kwargs)
    except BackendError as exc:
        logger.warning("%s %s failed (%s): %s", method.upper(), path, exc.status, exc.payload or exc.message)
        return failure(exc, error=error, errors=errors, backend_message=backend_message)

    body = decode(response)
    message = body.get("message") if isinstance(body, dict) and isinstance(body.get("message"), str) else None
    return ActionResponse(
        data=_unwrap(body, unwrap),
        error=None,
        status=response.status_code,
        msg=message or msg,
    )


__all__ = ["ActionResponse", "call", "decode", "failure", "upload_files", "DEFAULT_ERROR"]
