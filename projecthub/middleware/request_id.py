"""Request ID middleware.

Forwards a safe client X-Request-ID or generates one, exposes it on the
response, in request.state and in a context variable that the logging
filter stamps on every record emitted while the request runs. Raw ASGI.
"""

import re
import uuid
from collections.abc import Callable

from projecthub.shared.telemetry.logging import request_id_var

_SAFE_REQUEST_ID = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


def header_value(scope: dict, name: str) -> str | None:
    """First header value for name (case-insensitive)."""
    want = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == want:
            return value.decode("utf-8", errors="replace")
    return None


def resolve_request_id(raw: str | None) -> str:
    """Client value when it is safe to log, else a fresh UUID."""
    if raw and _SAFE_REQUEST_ID.match(raw.strip()):
        return raw.strip()
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Raw ASGI wrapper that tags requests and responses with a request id."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(header_value(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def send_with_header(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_name.encode(), request_id.encode()),
                ]
            await send(message)

        try:
            await app(scope, receive, send_with_header)
        finally:
            request_id_var.reset(token)

    return asgi_app
