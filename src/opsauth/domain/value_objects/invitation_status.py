"""Invitation lifecycle states."""

from enum import StrEnum


class InvitationStatus(StrEnum):
    """PENDING transitions once to one of the terminal states."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self is not InvitationStatus.PENDING
