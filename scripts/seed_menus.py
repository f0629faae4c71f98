"""Seed the permission catalogue and the default sidebar for an organisation.

Usage:
  python scripts/seed_menus.py <org_id> [--reset]

Without --reset an organisation that already has menu rows is left alone.
Permissions are upserted by name every time.
"""

import argparse
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from hrms import create_app
from hrms.extensions import db
from hrms.models.menu_item import MenuItem
from hrms.models.role import Permission
from hrms.services.navigation import default_navigation

# name, label, group, icon
PERMISSIONS = [
    ("payroll.view_own", "Voir ses bulletins", "Paie", "💰"),
    ("payroll.view", "Voir la paie", "Paie", "💰"),
    ("payroll.advances", "Gérer les avances", "Paie", "💰"),
    ("payroll.fund_requests", "Gérer les demandes de fonds", "Paie", "💰"),
    ("expenses.view", "Voir les notes de frais", "Paie", "💰"),
    ("leaves.approve", "Valider les congés", "Congés", "🏖️"),
    ("recruitment.view", "Voir le recrutement", "Recrutement", "🎯"),
    ("recruitment.manage", "Gérer le recrutement", "Recrutement", "🎯"),
    ("recruitment.interviews", "Gérer les entretiens", "Recrutement", "🎯"),
    ("performance.view", "Voir les évaluations", "Performance", "📈"),
    ("users.view", "Voir les utilisateurs", "Administration", "⚙️"),
    ("users.create", "Créer des utilisateurs", "Administration", "⚙️"),
    ("roles.manage", "Gérer rôles et menus", "Administration", "⚙️"),
    ("settings.manage", "Gérer les paramètres", "Administration", "⚙️"),
    ("system.admin", "Administration système", "Administration", "⚙️"),
]


def seed_permissions():
    created = 0
    for order, (name, label, group, icon) in enumerate(PERMISSIONS, start=1):
        p = Permission.query.filter_by(name=name).first()
        if p is None:
            p = Permission(name=name)
            db.session.add(p)
            created += 1
        p.label, p.group_name, p.group_icon, p.sort_order = label, group, icon, order
    return created


def _insert(node, org_id, parent_id, section):
    row = MenuItem(org_id=org_id, name=node.name, path=node.path, icon=node.icon,
                   section=section, description=node.description, parent_id=parent_id,
                   required_permission=node.required_permission,
                   allowed_roles=[getattr(r, "value", r) for r in node.allowed_roles] or None,
                   sort_order=node.sort_order, is_active=node.is_active)
    db.session.add(row)
    db.session.flush()
    count = 1
    for child in node.children:
        count += _insert(child, org_id, row.id, section)
    return count


def seed_menus(org_id, reset=False, order=None):
    existing = MenuItem.query.filter_by(org_id=org_id)
    if existing.count():
        if not reset:
            return 0
        rows = existing.all()
        # detach first so no parent_id points at a deleted row
        for row in rows:
            row.parent_id = None
        db.session.flush()
        for row in rows:
            db.session.delete(row)
        db.session.flush()
    total = 0
    for position, group in enumerate(default_navigation(order), start=1):
        group.sort_order = position
        total += _insert(group, org_id, None, group.id)
    return total


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("org_id", type=int)
    parser.add_argument("--reset", action="store_true", help="replace existing menu rows")
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        perms = seed_permissions()
        menus = seed_menus(args.org_id, reset=args.reset, order=app.config.get('NAV_GROUP_ORDER'))
        db.session.commit()
        app.logger.info('seeded %d permissions and %d menu rows for org %s', perms, menus, args.org_id)
        print(f"permissions created: {perms}, menu rows created: {menus}")


if __name__ == '__main__':
    main()
