"""Invitation entity - token-bounded provisioning of a new user."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from opsauth.domain.value_objects import InvitationStatus


@dataclass
class Invitation:
    """Invitation to join with a given role. Only the token digest is stored."""

    id: UUID
    email: str
    token_hash: str
    role_id: UUID
    invited_by: UUID
    expires_at: datetime
    created_at: datetime
    updated_at: datetime
    status: InvitationStatus = InvitationStatus.PENDING
    department_id: UUID | None = None
    message: str | None = None
    accepted_at: datetime | None = None
    accepted_by: UUID | None = None

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
