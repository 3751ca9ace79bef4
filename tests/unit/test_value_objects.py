"""Unit tests for permission keys, scopes, tokens and snapshots."""

from uuid import uuid4

import pytest

from opsauth.domain.value_objects import (
    AdminPermission,
    AuthorizationSnapshot,
    InvitationStatus,
    InvitationToken,
    PermissionKey,
    PermissionScope,
)


class TestPermissionKey:
    def test_parse_and_format(self) -> None:
        key = PermissionKey.parse("unit.read.property")
        assert key.resource == "unit"
        assert key.action == "read"
        assert key.scope is PermissionScope.PROPERTY
        assert str(key) == "unit.read.property"

    def test_underscores_and_digits_allowed(self) -> None:
        key = PermissionKey.parse("user_permission.manage.organization")
        assert key.resource == "user_permission"
        assert str(PermissionKey.parse("report2.export.platform")) == "report2.export.platform"

    @pytest.mark.parametrize(
        "raw",
        [
            "unit.read",
            "unit.read.property.extra",
            "unit.read.galaxy",
            "Unit.read.property",
            "unit..property",
            "1unit.read.property",
            "unit.re-ad.property",
            "",
        ],
    )
    def test_malformed_keys_rejected(self, raw: str) -> None:
        with pytest.raises(ValueError):
            PermissionKey.parse(raw)

    def test_scope_string_coerced(self) -> None:
        key = PermissionKey("task", "update", "organization")
        assert key.scope is PermissionScope.ORGANIZATION

    def test_equal_keys_hash_equal(self) -> None:
        assert {PermissionKey.parse("task.read.property")} == {
            PermissionKey("task", "read", PermissionScope.PROPERTY)
        }


class TestPermissionScope:
    def test_platform_covers_everything(self) -> None:
        assert all(PermissionScope.PLATFORM.covers(s) for s in PermissionScope)

    def test_property_covers_only_property(self) -> None:
        assert PermissionScope.PROPERTY.covers(PermissionScope.PROPERTY)
        assert not PermissionScope.PROPERTY.covers(PermissionScope.ORGANIZATION)
        assert not PermissionScope.PROPERTY.covers(PermissionScope.PLATFORM)

    def test_organization_covers_property(self) -> None:
        assert PermissionScope.ORGANIZATION.covers(PermissionScope.PROPERTY)
        assert not PermissionScope.ORGANIZATION.covers(PermissionScope.PLATFORM)


def test_admin_permission_at_scope() -> None:
    assert str(AdminPermission.ROLE_ASSIGN.at(PermissionScope.PLATFORM)) == "role.assign.platform"
    assert (
        str(AdminPermission.OVERRIDE_MANAGE.at(PermissionScope.PROPERTY))
        == "user_permission.manage.property"
    )


class TestInvitationToken:
    def test_generate_is_64_hex_chars(self) -> None:
        token = InvitationToken.generate()
        assert len(token.value) == 64
        int(token.value, 16)

    def test_generated_tokens_differ(self) -> None:
        assert InvitationToken.generate().value != InvitationToken.generate().value

    def test_digest_is_stable_sha256(self) -> None:
        token = InvitationToken("a" * 64)
        assert token.digest == InvitationToken("a" * 64).digest
        assert len(token.digest) == 64
        assert token.digest != token.value

    def test_wrong_length_rejected(self) -> None:
        with pytest.raises(ValueError, match="64 characters"):
            InvitationToken("short")


def test_only_pending_is_not_terminal() -> None:
    assert not InvitationStatus.PENDING.is_terminal
    assert all(
        s.is_terminal
        for s in (InvitationStatus.ACCEPTED, InvitationStatus.EXPIRED, InvitationStatus.CANCELLED)
    )


class TestAuthorizationSnapshot:
    def test_override_beats_role_membership(self) -> None:
        held, missing = uuid4(), uuid4()
        snapshot = AuthorizationSnapshot(
            user_id=uuid4(),
            role_id=uuid4(),
            role_permission_ids=frozenset({held}),
            overrides={held: False, missing: True},
        )
        assert snapshot.allows(held) is False
        assert snapshot.allows(missing) is True

    def test_role_membership_without_override(self) -> None:
        held = uuid4()
        snapshot = AuthorizationSnapshot(
            user_id=uuid4(), role_id=uuid4(), role_permission_ids=frozenset({held})
        )
        assert snapshot.allows(held) is True
        assert snapshot.allows(uuid4()) is False

    def test_no_role_denies_by_default(self) -> None:
        snapshot = AuthorizationSnapshot(user_id=uuid4(), role_id=None)
        assert snapshot.allows(uuid4()) is False
