"""User - principal holding at most one role."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class User:
    id: UUID
    email: str
    role_id: UUID | None
    created_at: datetime
    first_name: str = ""
    last_name: str = ""
    department_id: UUID | None = None
    organization_id: UUID | None = None
    property_id: UUID | None = None
    position: str | None = None
    phone_number: str | None = None
    is_active: bool = True
