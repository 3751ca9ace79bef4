"""Request parsing helpers shared by resources."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import falcon
import falcon.asgi

from opsauth.domain.value_objects import PermissionScope


def current_user(req: falcon.asgi.Request):
    """Authenticated user set by AuthMiddleware, or 401."""
    user = getattr(req.context, "user", None)
    if not user:
        raise falcon.HTTPUnauthorized(title="Unauthorized")
    return user


def parse_uuid(value: str, name: str) -> UUID:
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise falcon.HTTPBadRequest(title="Bad request", description=f"Invalid {name}") from None


def parse_optional_uuid(value: Any, name: str) -> UUID | None:
    if value in (None, ""):
        return None
    return parse_uuid(value, name)


def parse_scope(value: str) -> PermissionScope:
    try:
        return PermissionScope(value)
    except ValueError:
        raise falcon.HTTPBadRequest(
            title="Bad request", description=f"Invalid scope: {value}"
        ) from None


def parse_datetime(value: Any, name: str) -> datetime | None:
    """ISO 8601; naive values are taken as UTC."""
    if value in (None, ""):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise falcon.HTTPBadRequest(title="Bad request", description=f"Invalid {name}") from None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


async def read_body(req: falcon.asgi.Request) -> dict:
    body = await req.get_media(default_when_empty={})
    if not isinstance(body, dict):
        raise falcon.HTTPBadRequest(title="Bad request", description="Expected a JSON object")
    return body


def required(body: dict, field: str) -> Any:
    try:
        return body[field]
    except KeyError:
        raise falcon.HTTPBadRequest(
            title="Bad request", description=f"Missing required field: {field}"
        ) from None
