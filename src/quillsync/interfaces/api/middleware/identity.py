"""Identity middleware - trusts the caller id set by the upstream auth gateway."""

from dataclasses import dataclass

import falcon.asgi


@dataclass
class RequestUser:
    """User from request context."""

    user_id: str


class IdentityMiddleware:
    """Sets req.context.user from a trusted header, or None when absent."""

    def __init__(self, header_name: str = "X-User-Id") -> None:
        self._header = header_name

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user_id = (req.get_header(self._header) or "").strip()
        req.context.user = RequestUser(user_id=user_id) if user_id else None
