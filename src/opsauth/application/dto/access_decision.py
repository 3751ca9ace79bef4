"""Access decision returned by the guard."""

from dataclasses import dataclass

from opsauth.domain.value_objects import DenialReason


@dataclass(frozen=True)
class AccessDecision:
    """Allow, or Deny with a reason and the offending permission key."""

    allowed: bool
    reason: DenialReason | None = None
    permission_key: str | None = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenialReason, permission_key: str) -> "AccessDecision":
        return cls(allowed=False, reason=reason, permission_key=permission_key)

    def __bool__(self) -> bool:
        return self.allowed
