"""Invitation API resources."""

import falcon
import falcon.asgi

from opsauth.application.dto.invitation_dto import AcceptProfile, InvitationCreateInput
from opsauth.application.use_cases.invitation.accept_invitation import AcceptInvitationUseCase
from opsauth.application.use_cases.invitation.cancel_invitation import CancelInvitationUseCase
from opsauth.application.use_cases.invitation.create_invitation import CreateInvitationUseCase
from opsauth.application.use_cases.invitation.resend_invitation import ResendInvitationUseCase
from opsauth.interfaces.api.params import (
    current_user,
    parse_optional_uuid,
    parse_uuid,
    read_body,
    required,
)
from opsauth.interfaces.api.serializers import invitation_to_dict, user_to_dict


class InvitationsResource:
    """POST /v1/invitations - invite an email to a role.

    The raw token appears in this response only.
    """

    def __init__(self, create_invitation: CreateInvitationUseCase) -> None:
        self._create = create_invitation

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        caller = current_user(req)
        body = await read_body(req)
        issued = await self._create.execute(
            InvitationCreateInput(
                email=required(body, "email"),
                role_id=parse_uuid(required(body, "role_id"), "role ID"),
                department_id=parse_optional_uuid(body.get("department_id"), "department ID"),
                message=body.get("message"),
            ),
            inviter_id=caller.user_id,
        )
        resp.media = {
            **invitation_to_dict(issued.invitation),
            "token": issued.token,
            "accept_url": issued.accept_url,
        }
        resp.status = falcon.HTTP_201


class InvitationAcceptResource:
    """POST /v1/invitations/{invitation}/accept - public; the path carries the raw token."""

    def __init__(self, accept_invitation: AcceptInvitationUseCase) -> None:
        self._accept = accept_invitation

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, invitation: str
    ) -> None:
        body = await read_body(req)
        accepted = await self._accept.execute(
            invitation,
            AcceptProfile(
                first_name=required(body, "first_name"),
                last_name=required(body, "last_name"),
                position=body.get("position"),
                phone_number=body.get("phone_number"),
            ),
        )
        resp.media = {
            "user": user_to_dict(accepted.user),
            "invitation": invitation_to_dict(accepted.invitation),
        }
        resp.status = falcon.HTTP_201


class InvitationActionResource:
    """POST /v1/invitations/{invitation}/cancel and .../resend, by invitation id."""

    def __init__(
        self,
        cancel_invitation: CancelInvitationUseCase,
        resend_invitation: ResendInvitationUseCase,
    ) -> None:
        self._cancel = cancel_invitation
        self._resend = resend_invitation

    async def on_post_cancel(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, invitation: str
    ) -> None:
        caller = current_user(req)
        await self._cancel.execute(parse_uuid(invitation, "invitation ID"), caller.user_id)
        resp.status = falcon.HTTP_204

    async def on_post_resend(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, invitation: str
    ) -> None:
        caller = current_user(req)
        issued = await self._resend.execute(
            parse_uuid(invitation, "invitation ID"), caller.user_id
        )
        resp.media = {
            **invitation_to_dict(issued.invitation),
            "token": issued.token,
            "accept_url": issued.accept_url,
        }
