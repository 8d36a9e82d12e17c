"""Request body size limit middleware for uploads (attachments, imports).

A declared Content-Length above max_bytes is rejected up front. Bodies
without one (chunked) are read up to the limit, then replayed to the app.
Raw ASGI.
"""

import json
from collections.abc import Callable

from projecthub.middleware.request_id import header_value


async def _send_413(send: Callable, max_bytes: int) -> None:
    body = json.dumps(
        {
            "error": "PAYLOAD_TOO_LARGE",
            "message": f"Request body must be at most {max_bytes} bytes",
            "details": {"max_bytes": max_bytes},
        }
    ).encode()
    await send(
        {
            "type": "http.response.start",
            "status": 413,
            "headers": [(b"content-type", b"application/json")],
        }
    )
    await send({"type": "http.response.body", "body": body, "more_body": False})


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Return 413 for bodies larger than max_bytes."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = header_value(scope, "content-length")
        if declared is not None:
            if declared.strip().isdigit() and int(declared) > max_bytes:
                await _send_413(send, max_bytes)
                return
            await app(scope, receive, send)
            return

        messages: list[dict] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                messages.append(message)
                break
            total += len(message.get("body", b""))
            if total > max_bytes:
                await _send_413(send, max_bytes)
                return
            messages.append(message)
            if not message.get("more_body", False):
                break

        async def replay() -> dict:
            if messages:
                return messages.pop(0)
            return await receive()

        await app(scope, replay, send)

    return asgi_app
