"""Entity to JSON-compatible dict conversion."""

from datetime import datetime

from opsauth.application.dto.access_decision import AccessDecision
from opsauth.application.dto.role_dto import PermissionSummary
from opsauth.domain.entities import (
    Invitation,
    Permission,
    Role,
    User,
    UserPermissionOverride,
)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _str(value) -> str | None:
    return str(value) if value is not None else None


def permission_to_dict(p: Permission) -> dict:
    return {
        "id": str(p.id),
        "key": str(p.key),
        "resource": p.resource,
        "action": p.action,
        "scope": p.scope.value,
        "name": p.name,
        "description": p.description,
        "category": p.category,
        "is_system": p.is_system,
        "created_at": _iso(p.created_at),
    }


def role_to_dict(r: Role) -> dict:
    return {
        "id": str(r.id),
        "name": r.name,
        "description": r.description,
        "priority": r.priority,
        "scope": r.scope.value,
        "organization_id": _str(r.organization_id),
        "property_id": _str(r.property_id),
        "user_type": r.user_type.value,
        "allowed_modules": list(r.allowed_modules),
        "permission_ids": sorted(str(pid) for pid in r.permission_ids),
        "is_active": r.is_active,
        "is_system": r.is_system,
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }


def override_to_dict(o: UserPermissionOverride) -> dict:
    return {
        "id": str(o.id),
        "user_id": str(o.user_id),
        "permission_id": str(o.permission_id),
        "granted": o.granted,
        "is_active": o.is_active,
        "granted_by": str(o.granted_by),
        "granted_at": _iso(o.granted_at),
        "expires_at": _iso(o.expires_at),
        "revoked_by": _str(o.revoked_by),
        "revoked_at": _iso(o.revoked_at),
    }


def invitation_to_dict(i: Invitation) -> dict:
    """Never includes the token digest."""
    return {
        "id": str(i.id),
        "email": i.email,
        "role_id": str(i.role_id),
        "department_id": _str(i.department_id),
        "status": i.status.value,
        "message": i.message,
        "invited_by": str(i.invited_by),
        "expires_at": _iso(i.expires_at),
        "accepted_at": _iso(i.accepted_at),
        "accepted_by": _str(i.accepted_by),
        "created_at": _iso(i.created_at),
    }


def user_to_dict(u: User) -> dict:
    return {
        "id": str(u.id),
        "email": u.email,
        "first_name": u.first_name,
        "last_name": u.last_name,
        "role_id": _str(u.role_id),
        "department_id": _str(u.department_id),
        "organization_id": _str(u.organization_id),
        "property_id": _str(u.property_id),
        "is_active": u.is_active,
    }


def decision_to_dict(d: AccessDecision) -> dict:
    return {
        "allowed": d.allowed,
        "reason": d.reason.value if d.reason else None,
        "permission": d.permission_key,
    }


def summary_to_dict(s: PermissionSummary) -> dict:
    return {
        "user_id": str(s.user_id),
        "role": role_to_dict(s.role) if s.role else None,
        "role_permissions": [str(p.key) for p in s.role_permissions],
        "granted": [str(p.key) for p in s.granted],
        "denied": [str(p.key) for p in s.denied],
        "effective": [str(p.key) for p in s.effective],
        "overrides": [override_to_dict(o) for o in s.overrides],
    }
