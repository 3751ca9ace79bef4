"""Machine-distinguishable reasons for an access denial."""

from enum import StrEnum


class DenialReason(StrEnum):
    """Why the guard rejected a request."""

    PERMISSION_KEY_UNKNOWN = "permission_key_unknown"
    PERMISSION_DENIED = "permission_denied"
