"""Initial schema - permission catalog, roles, overrides, users, invitations.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_NIL_UUID = "'00000000-0000-0000-0000-000000000000'::uuid"


def upgrade() -> None:
    op.create_table(
        "permission",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("resource", sa.String(64), nullable=False),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("scope", sa.String(16), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("scope IN ('platform', 'organization', 'property')", name="ck_permission_scope"),
    )
    op.create_index(
        "ix_permission_key", "permission", ["resource", "action", "scope"], unique=True
    )

    op.create_table(
        "role",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("organization_id", sa.UUID(), nullable=True),
        sa.Column("property_id", sa.UUID(), nullable=True),
        sa.Column("user_type", sa.String(16), nullable=False, server_default="INTERNAL"),
        sa.Column("allowed_modules", postgresql.ARRAY(sa.String(64)), nullable=False, server_default="{}"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "property_id IS NULL OR organization_id IS NOT NULL", name="ck_role_property_in_org"
        ),
    )
    # Role names are unique per tenant context; NULL contexts compare equal.
    op.execute(
        f"CREATE UNIQUE INDEX ix_role_name_context ON role "
        f"(name, COALESCE(organization_id, {_NIL_UUID}), COALESCE(property_id, {_NIL_UUID}))"
    )

    op.create_table(
        "role_permission",
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("permission_id", sa.UUID(), sa.ForeignKey("permission.id"), primary_key=True),
    )
    op.create_index("ix_role_permission_permission", "role_permission", ["permission_id"])

    op.create_table(
        "app_user",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id"), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("department_id", sa.UUID(), nullable=True),
        sa.Column("organization_id", sa.UUID(), nullable=True),
        sa.Column("property_id", sa.UUID(), nullable=True),
        sa.Column("position", sa.String(100), nullable=True),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.execute("CREATE UNIQUE INDEX ix_app_user_email ON app_user (lower(email))")
    op.create_index("ix_app_user_role", "app_user", ["role_id"])

    op.create_table(
        "user_permission_override",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("permission_id", sa.UUID(), sa.ForeignKey("permission.id"), nullable=False),
        sa.Column("granted", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("granted_by", sa.UUID(), nullable=False),
        sa.Column("granted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by", sa.UUID(), nullable=True),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_override_user_permission",
        "user_permission_override",
        ["user_id", "permission_id"],
        unique=True,
    )
    op.create_index("ix_override_permission", "user_permission_override", ["permission_id"])

    op.create_table(
        "invitation",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id"), nullable=False),
        sa.Column("department_id", sa.UUID(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("invited_by", sa.UUID(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="PENDING"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("accepted_by", sa.UUID(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('PENDING', 'ACCEPTED', 'EXPIRED', 'CANCELLED')", name="ck_invitation_status"
        ),
    )
    op.create_index("ix_invitation_token_hash", "invitation", ["token_hash"], unique=True)
    op.create_index("ix_invitation_email_status", "invitation", ["email", "status"])
    op.create_index("ix_invitation_status_expires", "invitation", ["status", "expires_at"])


def downgrade() -> None:
    op.drop_table("invitation")
    op.drop_table("user_permission_override")
    op.drop_table("app_user")
    op.drop_table("role_permission")
    op.drop_table("role")
    op.drop_table("permission")
