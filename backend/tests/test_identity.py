"""
Identity value and context tests.
"""

import dataclasses

import pytest

from navguard.identity import ANONYMOUS, Identity, IdentityContext
from navguard.permissions import PermissionSlug


def make_identity(*slugs, role_name="doctor"):
    return Identity.authenticated(id=3, name="Dana", email="dana@hms.test", role_name=role_name, permission_slugs=slugs)


class TestIdentity:
    def test_is_frozen(self):
        identity = make_identity("view-patients")
        with pytest.raises(dataclasses.FrozenInstanceError):
            identity.role_name = "admin"

    def test_permission_slugs_become_frozenset(self):
        identity = Identity(permission_slugs=["a", "b", "a"])
        assert identity.permission_slugs == frozenset({"a", "b"})

    def test_has_permission_is_exact(self):
        identity = make_identity("view-patients")
        assert identity.has_permission("view-patients")
        assert not identity.has_permission("VIEW-PATIENTS")
        assert not identity.has_permission("")
        assert not identity.has_permission(None)

    def test_has_permission_accepts_enum_members(self):
        assert make_identity("view-roles").has_permission(PermissionSlug.VIEW_ROLES)

    def test_any_and_all(self):
        identity = make_identity("view-patients", "view-bills")
        assert identity.has_any_permission(["view-roles", "view-bills"])
        assert not identity.has_any_permission([])
        assert identity.has_all_permissions(["view-patients", "view-bills"])
        assert not identity.has_all_permissions(["view-patients", "view-roles"])

    @pytest.mark.parametrize("role_name,expected", [
        ("patient", True),
        ("Patient", True),
        ("  PATIENT ", True),
        ("patients", False),
        (None, False),
    ])
    def test_is_patient(self, role_name, expected):
        assert make_identity(role_name=role_name).is_patient is expected

    def test_from_payload(self):
        identity = Identity.from_payload(
            {"id": 9, "name": "Rey", "email": "rey@hms.test", "role": {"name": "receptionist"}},
            ["view-appointments"],
        )
        assert identity.is_authenticated
        assert identity.role_name == "receptionist"
        assert identity.permission_slugs == frozenset({"view-appointments"})

    def test_from_payload_without_role(self):
        identity = Identity.from_payload({"id": 9, "role": None}, None)
        assert identity.role_name is None
        assert identity.permission_slugs == frozenset()

    def test_anonymous(self):
        assert not ANONYMOUS.is_authenticated
        assert ANONYMOUS.to_dict()["permissions"] == []


class TestIdentityContext:
    def test_starts_anonymous(self):
        assert IdentityContext().identity is ANONYMOUS

    def test_set_identity_replaces_whole_value(self):
        context = IdentityContext()
        first = make_identity("view-patients")
        context.set_identity(first)

        second = make_identity("view-bills")
        context.set_identity(second)

        assert context.identity is second
        assert first.permission_slugs == frozenset({"view-patients"})

    def test_set_identity_rejects_other_types(self):
        with pytest.raises(TypeError):
            IdentityContext().set_identity({"role_name": "admin"})

    def test_mark_loading_keeps_previous_fields(self):
        context = IdentityContext(make_identity("view-patients"))
        previous = context.identity

        context.mark_loading()

        assert context.identity.loading
        assert context.identity is not previous
        assert context.identity.permission_slugs == previous.permission_slugs
        assert not previous.loading

    def test_clear(self):
        context = IdentityContext(make_identity("view-patients"))
        context.clear()
        assert context.identity is ANONYMOUS
