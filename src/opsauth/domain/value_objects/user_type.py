"""Class of principal a role may be held by."""

from enum import StrEnum


class UserType(StrEnum):
    INTERNAL = "INTERNAL"
    CLIENT = "CLIENT"
    VENDOR = "VENDOR"
