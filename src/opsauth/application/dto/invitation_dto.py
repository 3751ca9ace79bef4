"""Invitation DTOs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from opsauth.domain.entities import Invitation, User


@dataclass
class InvitationCreateInput:
    """Input for creating an invitation."""

    email: str
    role_id: UUID
    department_id: UUID | None = None
    message: str | None = None


@dataclass
class AcceptProfile:
    """Profile fields supplied by the invitee on acceptance."""

    first_name: str
    last_name: str
    position: str | None = None
    phone_number: str | None = None


@dataclass
class InvitationIssued:
    """Invitation plus the raw token; the token is never retrievable again."""

    invitation: Invitation
    token: str
    accept_url: str


@dataclass
class InvitationAccepted:
    user: User
    invitation: Invitation


@dataclass
class InvitationMessage:
    """What a delivery channel needs to notify the invitee."""

    email: str
    role_name: str
    accept_url: str
    expires_at: datetime
    message: str | None = None
    reminder: bool = False
