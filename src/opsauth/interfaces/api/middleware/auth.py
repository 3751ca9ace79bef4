"""Auth middleware - resolves the bearer token to a user id."""

from dataclasses import dataclass
from uuid import UUID

import falcon.asgi


@dataclass
class RequestUser:
    """User from request context."""

    user_id: UUID
    email: str | None = None
    username: str | None = None


class AuthMiddleware:
    """Middleware that introspects the bearer token and sets req.context.user.

    ``req.context.user`` is None for missing or rejected tokens; responders that
    need a caller answer 401.
    """

    def __init__(self, keycloak_provider=None) -> None:
        self._keycloak = keycloak_provider

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer ") or not self._keycloak:
            return
        user = await self._keycloak.decode_token(auth[7:])
        if user:
            req.context.user = RequestUser(
                user_id=user.user_id,
                email=user.email,
                username=user.username,
            )
