import pytest

from hrms.services.access import (
    AccessRule, RoleCode, RoleContext, is_access_allowed, normalize_role, split_permissions,
)
from hrms.services.errors import InvalidContext


def ctx(role="ROLE_EMPLOYEE", *perms):
    return RoleContext.from_claims(role, perms)


def test_open_rule_allows_everyone():
    assert is_access_allowed(AccessRule(), ctx())
    assert is_access_allowed(None, ctx("ROLE_MANAGER"))


def test_super_admin_bypasses_everything():
    rule = AccessRule("system.admin", (RoleCode.ADMIN,))
    assert is_access_allowed(rule, ctx("ROLE_SUPER_ADMIN"))


def test_permission_or_role():
    rule = AccessRule("payroll.view", (RoleCode.HR, RoleCode.ADMIN))
    assert is_access_allowed(rule, ctx("ROLE_EMPLOYEE", "payroll.view"))
    assert is_access_allowed(rule, ctx("ROLE_RH"))
    assert not is_access_allowed(rule, ctx("ROLE_EMPLOYEE"))
    assert not is_access_allowed(rule, ctx("ROLE_MANAGER", "payroll.view_own"))


def test_comma_separated_permission_is_any_of():
    rule = AccessRule("payroll.view_own,payroll.view")
    assert is_access_allowed(rule, ctx("ROLE_EMPLOYEE", "payroll.view_own"))
    assert is_access_allowed(rule, ctx("ROLE_EMPLOYEE", "payroll.view"))
    assert not is_access_allowed(rule, ctx("ROLE_EMPLOYEE", "expenses.view"))


def test_permission_names_are_case_sensitive():
    rule = AccessRule("payroll.view")
    assert not is_access_allowed(rule, ctx("ROLE_EMPLOYEE", "Payroll.View"))


def test_role_only_rule_ignores_permissions():
    rule = AccessRule(None, (RoleCode.MANAGER,))
    assert is_access_allowed(rule, ctx("ROLE_MANAGER"))
    assert not is_access_allowed(rule, ctx("ROLE_EMPLOYEE", "anything"))


@pytest.mark.parametrize("raw,expected", [
    ("ROLE_RH", RoleCode.HR),
    ("rh", RoleCode.HR),
    ("HR", RoleCode.HR),
    (" manager ", RoleCode.MANAGER),
    ("Super Admin", RoleCode.SUPER_ADMIN),
    ("super-admin", RoleCode.SUPER_ADMIN),
    ("role-super-admin", RoleCode.SUPER_ADMIN),
    ("employé", RoleCode.EMPLOYEE),
    (RoleCode.ADMIN, RoleCode.ADMIN),
])
def test_normalize_role_aliases(raw, expected):
    assert normalize_role(raw) is expected


@pytest.mark.parametrize("raw", [None, "", "ROLE_INTERN", 3])
def test_normalize_role_rejects_unknown(raw):
    with pytest.raises(InvalidContext):
        normalize_role(raw)


def test_invalid_context_raises():
    with pytest.raises(InvalidContext):
        is_access_allowed(AccessRule(), None)
    with pytest.raises(InvalidContext):
        is_access_allowed(AccessRule(), "ROLE_ADMIN")


def test_split_permissions():
    assert split_permissions(None) == frozenset()
    assert split_permissions(" a.b , c.d ,") == {"a.b", "c.d"}
    assert split_permissions(["x", "", "y"]) == {"x", "y"}


def test_context_from_user_uses_custom_role_permissions():
    class FakeUser:
        role = "ROLE_MANAGER"

        def permission_names(self):
            return ["leaves.approve"]

    c = RoleContext.from_user(FakeUser())
    assert c.role is RoleCode.MANAGER
    assert c.permissions == {"leaves.approve"}
    assert not c.is_super_admin


def test_super_admin_claim_with_hyphen_sees_everything():
    c = RoleContext.from_claims("super-admin", [])
    assert c.is_super_admin
    assert is_access_allowed(AccessRule("system.admin", (RoleCode.ADMIN,)), c)


def test_rule_roles_are_normalized():
    rule = AccessRule(None, ("manager", "ROLE_HR"))
    assert rule.allowed_roles == (RoleCode.MANAGER, RoleCode.HR)
    assert is_access_allowed(rule, ctx("ROLE_MANAGER"))
    assert is_access_allowed(rule, ctx("ROLE_RH"))
    assert not is_access_allowed(rule, ctx("ROLE_ADMIN"))

    assert AccessRule(None, "admin, rh").allowed_roles == (RoleCode.ADMIN, RoleCode.HR)


def test_unknown_rule_role_never_matches_and_keeps_rule_closed():
    rule = AccessRule(None, ("intern",))
    assert not rule.is_open
    assert not is_access_allowed(rule, ctx("ROLE_EMPLOYEE"))
    assert is_access_allowed(rule, ctx("ROLE_SUPER_ADMIN"))
