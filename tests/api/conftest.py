"""Fixtures for API tests."""

from uuid import UUID

import pytest
from falcon.testing import TestClient

from opsauth.interfaces.api.app import create_app
from opsauth.interfaces.api.middleware.auth import RequestUser
from opsauth.main import build_use_cases


class AuthBypassMiddleware:
    """Sets req.context.user from the X-Test-User header; no header means anonymous."""

    async def process_request(self, req, resp):
        raw = req.get_header("X-Test-User")
        req.context.user = RequestUser(user_id=UUID(raw)) if raw else None


@pytest.fixture
def app(uow_factory, access_guard, resolver, mock_notifier):
    """Falcon ASGI app backed by the in-memory unit of work."""
    use_cases = build_use_cases(
        uow_factory,
        access_guard,
        resolver,
        notifier=mock_notifier,
        invitation_base_url="https://app.example.com/invite",
    )
    return create_app(
        uow_factory, access_guard, use_cases, middleware=[AuthBypassMiddleware()]
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def as_admin(admin) -> dict:
    return {"X-Test-User": str(admin.id)}
