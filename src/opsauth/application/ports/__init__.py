"""Application ports - interfaces for external adapters."""

from opsauth.application.ports.access_guard import AccessGuard
from opsauth.application.ports.invitation_notifier import InvitationNotifier
from opsauth.application.ports.permission_resolver import PermissionResolver
from opsauth.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AccessGuard",
    "InvitationNotifier",
    "PermissionResolver",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
