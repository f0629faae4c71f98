"""Role context and the single access predicate used by menus and views.

Every permission/role check in the application goes through
``is_access_allowed`` so sidebar filtering and endpoint guards agree.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple

from .errors import InvalidContext

logger = logging.getLogger(__name__)


class RoleCode(str, enum.Enum):
    EMPLOYEE = "ROLE_EMPLOYEE"
    MANAGER = "ROLE_MANAGER"
    HR = "ROLE_RH"
    ADMIN = "ROLE_ADMIN"
    SUPER_ADMIN = "ROLE_SUPER_ADMIN"


ROLE_ALIASES = {
    "ROLE_EMPLOYEE": RoleCode.EMPLOYEE,
    "EMPLOYEE": RoleCode.EMPLOYEE,
    "EMPLOYÉ": RoleCode.EMPLOYEE,
    "ROLE_MANAGER": RoleCode.MANAGER,
    "MANAGER": RoleCode.MANAGER,
    "ROLE_RH": RoleCode.HR,
    "RH": RoleCode.HR,
    "ROLE_HR": RoleCode.HR,
    "HR": RoleCode.HR,
    "ROLE_ADMIN": RoleCode.ADMIN,
    "ADMIN": RoleCode.ADMIN,
    "ROLE_SUPER_ADMIN": RoleCode.SUPER_ADMIN,
    "SUPER_ADMIN": RoleCode.SUPER_ADMIN,
    "SUPERADMIN": RoleCode.SUPER_ADMIN,
}


def normalize_role(value) -> RoleCode:
    """Map a free-form role name (token claim, DB column) to a RoleCode.

    Case, surrounding blanks and the separator ("super admin", "super-admin",
    "super_admin") do not matter. Raises InvalidContext for empty or unknown
    names.
    """
    if isinstance(value, RoleCode):
        return value
    if not value or not isinstance(value, str):
        raise InvalidContext(f"missing role code: {value!r}")
    key = "_".join(value.strip().upper().replace("-", " ").replace("_", " ").split())
    code = ROLE_ALIASES.get(key)
    if code is None:
        raise InvalidContext(f"unknown role code: {value!r}")
    return code


def split_permissions(raw) -> FrozenSet[str]:
    """``"payroll.view_own,payroll.view"`` -> {"payroll.view_own", "payroll.view"}."""
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        raw = raw.split(",")
    return frozenset(p.strip() for p in raw if p and p.strip())


@dataclass(frozen=True)
class RoleContext:
    role: RoleCode
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "permissions", frozenset(self.permissions or ()))

    @property
    def is_super_admin(self) -> bool:
        return self.role == RoleCode.SUPER_ADMIN

    @classmethod
    def from_claims(cls, role, permissions: Iterable[str] = ()) -> "RoleContext":
        return cls(normalize_role(role), frozenset(permissions or ()))

    @classmethod
    def from_user(cls, user) -> "RoleContext":
        perms = user.permission_names() if hasattr(user, "permission_names") else ()
        return cls.from_claims(getattr(user, "role", None), perms)


def _role_codes(names) -> tuple:
    """Normalize a rule's role list. Unknown names are kept verbatim so they
    never match a context and never turn the rule into an open one."""
    if isinstance(names, str):
        names = names.split(",")
    codes = []
    for name in names or ():
        if isinstance(name, str) and not name.strip():
            continue
        try:
            codes.append(normalize_role(name))
        except InvalidContext:
            logger.warning("access rule names unknown role %r, it will never match", name)
            codes.append(name)
    return tuple(codes)


@dataclass(frozen=True)
class AccessRule:
    required_permission: Optional[str] = None
    allowed_roles: Tuple[RoleCode, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "allowed_roles", _role_codes(self.allowed_roles))

    @property
    def required_permissions(self) -> FrozenSet[str]:
        return split_permissions(self.required_permission)

    @property
    def is_open(self) -> bool:
        return not self.required_permissions and not self.allowed_roles


OPEN = AccessRule()


def validate_context(ctx) -> RoleContext:
    if ctx is None:
        raise InvalidContext("no role context")
    if not isinstance(ctx, RoleContext) or not isinstance(ctx.role, RoleCode):
        raise InvalidContext(f"invalid role context: {ctx!r}")
    return ctx


def is_access_allowed(rule: Optional[AccessRule], ctx: RoleContext) -> bool:
    ctx = validate_context(ctx)
    if ctx.is_super_admin:
        return True
    rule = rule or OPEN
    if rule.required_permissions & ctx.permissions:
        return True
    if rule.allowed_roles and ctx.role in rule.allowed_roles:
        return True
    return rule.is_open
