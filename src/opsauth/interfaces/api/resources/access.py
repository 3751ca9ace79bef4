"""Access check endpoint."""

import falcon
import falcon.asgi

from opsauth.application.ports import AccessGuard
from opsauth.interfaces.api.params import current_user
from opsauth.interfaces.api.serializers import decision_to_dict


class AccessResource:
    """GET /v1/access?permission=a.b.c&permission=... - guard decision for the caller.

    Always 200; the decision is in the body. Unknown keys deny with
    reason ``permission_key_unknown``.
    """

    def __init__(self, access_guard: AccessGuard) -> None:
        self._access_guard = access_guard

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        caller = current_user(req)
        keys = req.get_param_as_list("permission") or []
        if not keys:
            raise falcon.HTTPBadRequest(
                title="Bad request", description="At least one permission parameter is required"
            )
        decision = await self._access_guard.check(caller.user_id, *keys)
        resp.media = decision_to_dict(decision)
