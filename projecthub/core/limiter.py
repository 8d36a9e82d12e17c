"""Rate limiter instance for SlowAPI.

One shared instance for main (app.state.limiter) and the route modules.
Requests are keyed by the acting user when the actor header is present,
otherwise by client address.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from projecthub.core.config import get_settings

WRITE_ENDPOINT_LIMIT = "120/minute"
UPLOAD_LIMIT = "30/minute"


def actor_or_address(request: Request) -> str:
    actor = request.headers.get(get_settings().actor_header)
    if actor and actor.strip().isdigit():
        return f"user:{actor.strip()}"
    return get_remote_address(request)


limiter = Limiter(key_func=actor_or_address)

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_upload = limiter.limit(UPLOAD_LIMIT)
