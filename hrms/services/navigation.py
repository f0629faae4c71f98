"""Permission-filtered sidebar navigation.

Menus come either from the ``menu_items`` table (flat rows with ``parent_id``)
or from the static ``default_navigation()`` definition. Both are turned into a
forest of ``MenuNode`` and pruned per request with ``resolve_visible_menu``.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .access import AccessRule, RoleCode, RoleContext, is_access_allowed, validate_context
from .errors import InvalidContext, MalformedMenuNode

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "main"

MANAGER_UP = (RoleCode.MANAGER, RoleCode.HR, RoleCode.ADMIN, RoleCode.SUPER_ADMIN)
HR_UP = (RoleCode.HR, RoleCode.ADMIN, RoleCode.SUPER_ADMIN)
ADMIN_UP = (RoleCode.ADMIN, RoleCode.SUPER_ADMIN)


@dataclass
class MenuNode:
    id: Any
    name: str
    path: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Any = None
    required_permission: Optional[str] = None
    allowed_roles: Tuple[str, ...] = ()
    sort_order: int = 0
    is_active: bool = True
    section: Optional[str] = None
    description: Optional[str] = None
    children: List["MenuNode"] = field(default_factory=list)

    @property
    def access_rule(self) -> AccessRule:
        return AccessRule(self.required_permission or None, tuple(self.allowed_roles or ()))

    @property
    def is_section_header(self) -> bool:
        return not self.path and bool(self.children)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "icon": self.icon,
            "parent_id": self.parent_id,
            "section": self.section or DEFAULT_SECTION,
            "sort_order": self.sort_order,
            "is_active": self.is_active,
            "required_permission": self.required_permission,
            "allowed_roles": [getattr(r, "value", r) for r in self.allowed_roles],
            "description": self.description,
            "children": [c.to_dict() for c in self.children],
        }


def _check_parents(nodes: Iterable[MenuNode], container_id, seen: set):
    for node in nodes:
        if node.id in seen:
            raise MalformedMenuNode(f"menu node {node.id!r} appears more than once", node_id=node.id)
        seen.add(node.id)
        if node.parent_id is not None and node.parent_id != container_id:
            where = "at the root" if container_id is None else f"under {container_id!r}"
            raise MalformedMenuNode(
                f"menu node {node.id!r} references parent {node.parent_id!r} but is placed {where}",
                node_id=node.id, parent_id=node.parent_id,
            )
        _check_parents(node.children, node.id, seen)


def _resolve_node(node: MenuNode, ctx: RoleContext) -> Optional[MenuNode]:
    if not node.is_active:
        return None
    if not is_access_allowed(node.access_rule, ctx):
        return None
    children = []
    for child in sorted(node.children, key=lambda c: c.sort_order):
        resolved = _resolve_node(child, ctx)
        if resolved is not None:
            children.append(resolved)
    if not node.path and not children:
        return None
    return replace(node, allowed_roles=tuple(node.allowed_roles or ()), children=children)


def resolve_visible_menu(forest: List[MenuNode], ctx: RoleContext) -> List[MenuNode]:
    """Return the part of ``forest`` that ``ctx`` may see.

    Inactive nodes and nodes whose access rule fails are dropped together with
    their subtree. A node without a path survives only if one of its children
    does. Children come back in ``sort_order`` (stable), roots in input order.
    The input is never modified.

    An invalid context yields an empty forest. A parent reference that does
    not match the forest raises ``MalformedMenuNode``.
    """
    try:
        validate_context(ctx)
    except InvalidContext as e:
        logger.warning("menu resolution denied: %s", e)
        return []
    forest = list(forest or [])
    _check_parents(forest, None, set())
    visible = []
    for node in forest:
        resolved = _resolve_node(node, ctx)
        if resolved is not None:
            visible.append(resolved)
    return visible


def _row_get(row, key, default=None):
    if isinstance(row, dict):
        return row.get(key, default)
    return getattr(row, key, default)


def node_from_row(row) -> MenuNode:
    roles = _row_get(row, "allowed_roles") or ()
    if isinstance(roles, str):
        roles = [r.strip() for r in roles.split(",") if r.strip()]
    return MenuNode(
        id=_row_get(row, "id"),
        name=_row_get(row, "name"),
        path=_row_get(row, "path") or None,
        icon=_row_get(row, "icon"),
        parent_id=_row_get(row, "parent_id"),
        required_permission=_row_get(row, "required_permission") or None,
        allowed_roles=tuple(roles),
        sort_order=_row_get(row, "sort_order") or 0,
        is_active=bool(_row_get(row, "is_active", True)),
        section=_row_get(row, "section"),
        description=_row_get(row, "description"),
    )


def build_menu_forest(rows: Iterable) -> List[MenuNode]:
    """Assemble flat ``parent_id`` rows into a forest.

    Roots and siblings keep input order (``resolve_visible_menu`` does the
    sorting). Unknown parents, self-references and cycles raise
    ``MalformedMenuNode`` instead of being dropped or promoted to roots.
    """
    nodes = [node_from_row(r) for r in rows]
    by_id: Dict[Any, MenuNode] = {}
    for n in nodes:
        if n.id is None:
            raise MalformedMenuNode("menu row without id")
        if n.id in by_id:
            raise MalformedMenuNode(f"duplicate menu id {n.id!r}", node_id=n.id)
        by_id[n.id] = n

    roots = []
    for n in nodes:
        if n.parent_id is None:
            roots.append(n)
            continue
        if n.parent_id == n.id:
            raise MalformedMenuNode(f"menu node {n.id!r} is its own parent", node_id=n.id, parent_id=n.parent_id)
        parent = by_id.get(n.parent_id)
        if parent is None:
            raise MalformedMenuNode(
                f"menu node {n.id!r} references unknown parent {n.parent_id!r}",
                node_id=n.id, parent_id=n.parent_id,
            )
        parent.children.append(n)

    # anything not reachable from a root sits on a cycle
    reached = set()
    stack = list(roots)
    while stack:
        n = stack.pop()
        reached.add(n.id)
        stack.extend(n.children)
    for n in nodes:
        if n.id not in reached:
            raise MalformedMenuNode(f"menu node {n.id!r} is part of a parent cycle", node_id=n.id, parent_id=n.parent_id)
    return roots


def group_by_section(forest: Iterable[MenuNode]) -> Dict[str, List[MenuNode]]:
    groups: Dict[str, List[MenuNode]] = {}
    for node in forest:
        groups.setdefault(node.section or DEFAULT_SECTION, []).append(node)
    return groups


def _item(id, name, path, icon=None, permission=None, roles=(), order=0):
    return MenuNode(id=id, name=name, path=path, icon=icon, required_permission=permission,
                    allowed_roles=tuple(roles), sort_order=order)


def _group(id, name, icon, children, permission=None, roles=()):
    for c in children:
        c.parent_id = id
    return MenuNode(id=id, name=name, icon=icon, required_permission=permission,
                    allowed_roles=tuple(roles), children=children)


def default_navigation(order: Optional[Iterable[str]] = None) -> List[MenuNode]:
    """Static sidebar used when an organisation has no menu rows."""
    groups = {
        "Self": _group("self", "Mon Espace", "🏠", [
            _item("self.dashboard", "Tableau de bord", "/employee-dashboard", "🏠", order=1),
            _item("self.attendance", "Pointage", "/attendance", "⏰", order=2),
            _item("self.leaves", "Mes Congés", "/leaves/my-leaves", "🏖️", order=3),
            _item("self.payslips", "Bulletins de Paie", "/payroll/payslips", "🧾",
                  permission="payroll.view_own,payroll.view", order=4),
            _item("self.trainings", "Mes Formations", "/training/my-trainings", "🎓", order=5),
        ]),
        "Team": _group("team", "Gestion d'équipe", "👥", [
            _item("team.directory", "Annuaire des employés", "/employees", roles=MANAGER_UP, order=1),
            _item("team.orgchart", "Organigramme", "/employees/organigramme", roles=MANAGER_UP, order=2),
            _item("team.leave_review", "Validation des Congés", "/leaves/review",
                  permission="leaves.approve", roles=MANAGER_UP, order=3),
            _item("team.schedule", "Planning Équipes", "/planning/team-schedule", roles=MANAGER_UP, order=4),
        ], roles=MANAGER_UP),
        "Talent": _group("talent", "Recrutement & Talents", "🎯", [
            _item("talent.jobs", "Offres d'Emploi", "/recruitment/jobs", roles=HR_UP, order=1),
            _item("talent.applications", "Candidatures", "/recruitment/applications", roles=HR_UP, order=2),
            _item("talent.scoring", "Scoring & Classement", "/recruitment/scoring",
                  permission="recruitment.manage", roles=HR_UP, order=3),
            _item("talent.interviews", "Entretiens", "/recruitment/interviews",
                  permission="recruitment.interviews", roles=HR_UP, order=4),
            _item("talent.reviews", "Campagnes d'évaluation", "/performance/reviews",
                  permission="performance.view", roles=MANAGER_UP, order=5),
        ], permission="recruitment.view,performance.view", roles=MANAGER_UP),
        "Finance": _group("finance", "Finance & Paie", "💰", [
            _item("finance.salaries", "Gestion Salaires", "/payroll/salaries",
                  permission="payroll.view", roles=HR_UP, order=1),
            _item("finance.advances", "Avances sur Salaire", "/payroll/advances",
                  permission="payroll.advances", roles=HR_UP, order=2),
            _item("finance.fund_requests", "Demandes de Fonds", "/payroll/fund-requests",
                  permission="payroll.fund_requests", roles=HR_UP, order=3),
            _item("finance.expenses", "Notes de Frais", "/expenses", permission="expenses.view", order=4),
        ]),
        "System": _group("system", "Administration", "⚙️", [
            _item("system.users", "Utilisateurs", "/users", permission="users.view", roles=HR_UP, order=1),
            _item("system.roles", "Rôles & Permissions", "/users/roles", permission="roles.manage", roles=ADMIN_UP, order=2),
            _item("system.menus", "Menus", "/users/menus", permission="roles.manage", roles=ADMIN_UP, order=3),
            _item("system.settings", "Paramètres Application", "/settings", permission="settings.manage", roles=ADMIN_UP, order=4),
            _item("system.logs", "Logs & Audit", "/admin/logs", roles=ADMIN_UP, order=5),
        ], permission="system.admin", roles=ADMIN_UP),
    }
    order = list(order or groups.keys())
    forest = [groups[name] for name in order if name in groups]
    forest.extend(g for name, g in groups.items() if name not in order)
    return forest
