"""Invitation repository port.

Status transitions are compare-and-set: each returns False when the row was
not PENDING at the moment of the update.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from opsauth.domain.entities import Invitation


class InvitationRepository(Protocol):
    """Port for invitation persistence."""

    async def get_by_id(self, invitation_id: UUID) -> Invitation | None: ...

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None: ...

    async def get_pending_for_email(self, email: str, now: datetime) -> Invitation | None: ...

    async def create(self, invitation: Invitation) -> Invitation: ...

    async def mark_accepted(
        self, invitation_id: UUID, accepted_by: UUID, at: datetime
    ) -> bool: ...

    async def mark_expired(self, invitation_id: UUID, at: datetime) -> bool: ...

    async def mark_cancelled(self, invitation_id: UUID, at: datetime) -> bool: ...

    async def rotate_token(
        self, invitation_id: UUID, token_hash: str, expires_at: datetime, at: datetime
    ) -> bool: ...

    async def expire_stale(self, now: datetime) -> int: ...

    async def count_by_role(self, role_id: UUID) -> int: ...
