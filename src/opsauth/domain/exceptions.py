"""Domain exceptions."""


class OpsAuthError(Exception):
    """Base exception for opsauth."""

    pass


class NotFound(OpsAuthError):
    """Referenced record was not found."""

    def __init__(self, entity: str, identifier: object) -> None:
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier


class InvalidPermission(OpsAuthError):
    """Role or override references an unknown or unusable permission."""

    pass


class ScopeMismatch(InvalidPermission):
    """Permission scope is broader than the scope of the role carrying it."""

    pass


class InUse(OpsAuthError):
    """Delete blocked by a live reference."""

    pass


class Forbidden(OpsAuthError):
    """Actor lacks authority for the administrative action itself."""

    pass


class InvalidToken(OpsAuthError):
    """Invitation token is unknown."""

    pass


class Expired(OpsAuthError):
    """Invitation expired before it was accepted."""

    pass


class AlreadyProcessed(OpsAuthError):
    """Invitation is no longer pending."""

    pass


class InvalidState(OpsAuthError):
    """Transition not allowed from the current state."""

    pass


class PermissionKeyUnknown(OpsAuthError):
    """Declared permission requirement does not exist in the catalog.

    This is a configuration bug, never an ordinary authorization failure.
    """

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown permission key: {key}")
        self.key = key


class Conflict(OpsAuthError):
    """Record collides with an existing one."""

    pass


class ValidationError(OpsAuthError):
    """Validation failed for input data."""

    pass


class DeliveryFailed(OpsAuthError):
    """Invitation message could not be handed to the delivery channel."""

    pass
