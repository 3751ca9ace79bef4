"""Single-use invitation token."""

import hashlib
import secrets
from dataclasses import dataclass


@dataclass(frozen=True)
class InvitationToken:
    """Raw invitation token (64 hex chars). Only its digest is persisted."""

    value: str

    def __post_init__(self) -> None:
        if len(self.value) != 64:
            raise ValueError("Invitation token must be 64 characters")

    @classmethod
    def generate(cls) -> "InvitationToken":
        return cls(secrets.token_hex(32))

    @property
    def digest(self) -> str:
        """SHA-256 hex digest stored in place of the token."""
        return hashlib.sha256(self.value.encode("utf-8")).hexdigest()
