"""System permission catalog and system roles installed by ``opsauth seed``.

Role patterns use ``*`` for any resource, action or scope and are expanded
against the catalog at seed time.
"""

from opsauth.application.use_cases.catalog.seed_catalog import PermissionSeed, RoleSeed
from opsauth.domain.value_objects import AdminPermission, PermissionScope, UserType

CRUD_ACTIONS = ("create", "read", "update", "delete")

RESOURCE_CATEGORIES = {
    "unit": "operations",
    "guest": "operations",
    "reservation": "operations",
    "task": "operations",
    "role": "administration",
    "user": "administration",
    "invitation": "administration",
    "permission": "administration",
    "user_permission": "administration",
    "department": "organization",
    "organization": "organization",
    "property": "organization",
}

_SCOPE_LABELS = {
    PermissionScope.PLATFORM: "across the platform",
    PermissionScope.ORGANIZATION: "within an organization",
    PermissionScope.PROPERTY: "within a property",
}


def _label(resource: str) -> str:
    return resource.replace("_", " ")


def build_permission_seeds() -> list[PermissionSeed]:
    """CRUD on every resource plus the administrative actions, at every scope."""
    seeds = []
    for scope in PermissionScope:
        for resource, category in RESOURCE_CATEGORIES.items():
            for action in CRUD_ACTIONS:
                seeds.append(
                    PermissionSeed(
                        key=f"{resource}.{action}.{scope.value}",
                        name=f"{action.capitalize()} {_label(resource)}",
                        description=f"{action.capitalize()} {_label(resource)} {_SCOPE_LABELS[scope]}",
                        category=category,
                    )
                )
        for admin in AdminPermission:
            resource, action = admin.value.split(".")
            seeds.append(
                PermissionSeed(
                    key=str(admin.at(scope)),
                    name=f"{action.capitalize()} {_label(resource)}",
                    description=f"{action.capitalize()} {_label(resource)} {_SCOPE_LABELS[scope]}",
                    category="administration",
                )
            )
    return seeds


_OPERATIONS = ("unit", "guest", "reservation", "task")

SYSTEM_ROLES = [
    RoleSeed(
        name="PLATFORM_ADMIN",
        description="Full access to the platform",
        priority=1000,
        patterns=("*.*.*",),
    ),
    RoleSeed(
        name="ORGANIZATION_OWNER",
        description="Full access within an organization and its properties",
        priority=900,
        patterns=("*.*.organization", "*.*.property"),
    ),
    RoleSeed(
        name="ORGANIZATION_ADMIN",
        description="Manages an organization without deleting it",
        priority=800,
        patterns=(
            "*.create.organization",
            "*.read.organization",
            "*.update.organization",
            "role.assign.organization",
            "invitation.manage.organization",
            "user_permission.manage.organization",
            "*.*.property",
        ),
    ),
    RoleSeed(
        name="PROPERTY_MANAGER",
        description="Full access within a property",
        priority=700,
        patterns=("*.*.property",),
    ),
    RoleSeed(
        name="DEPARTMENT_ADMIN",
        description="Runs a department: tasks, staff invitations, read-only operations",
        priority=600,
        patterns=(
            "task.*.property",
            "user.read.property",
            "department.read.property",
            "role.assign.property",
            "invitation.manage.property",
            *(f"{r}.read.property" for r in _OPERATIONS),
        ),
    ),
    RoleSeed(
        name="STAFF",
        description="Day-to-day operations within a property",
        priority=500,
        patterns=(
            "task.update.property",
            *(f"{r}.read.property" for r in _OPERATIONS),
        ),
    ),
    RoleSeed(
        name="VENDOR",
        description="External vendor working on assigned tasks",
        priority=300,
        user_type=UserType.VENDOR,
        patterns=("task.read.property", "task.update.property"),
        allowed_modules=("tasks",),
    ),
    RoleSeed(
        name="CLIENT",
        description="Property owner client with read access to their units",
        priority=200,
        user_type=UserType.CLIENT,
        patterns=("unit.read.property", "reservation.read.property"),
        allowed_modules=("units", "reservations"),
    ),
]
