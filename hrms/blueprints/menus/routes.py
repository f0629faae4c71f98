from flask import current_app, jsonify, request
from flask_login import login_required, current_user
from . import bp
from .forms import MenuItemForm, MenuItemUpdateForm
from ...extensions import db
from ...models.menu_item import MenuItem
from ...services.errors import MalformedMenuNode
from ...services.navigation import (
    build_menu_forest, default_navigation, group_by_section, resolve_visible_menu,
)
from ...utils.decorators import current_context, menus_admin_required
from ...utils.forms import request_formdata, validation_error

FIELDS = ("name", "path", "icon", "section", "description", "parent_id", "required_permission", "sort_order")


def _org_rows(org_id):
    return MenuItem.query.filter_by(org_id=org_id).order_by(MenuItem.id).all()


def _org_forest(org_id):
    rows = _org_rows(org_id)
    if not rows:
        return default_navigation(current_app.config.get('NAV_GROUP_ORDER'))
    return build_menu_forest([r.to_row() for r in rows])


def _inconsistent(e):
    current_app.logger.error('menu tree for org %s is inconsistent: %s', current_user.org_id, e)
    return jsonify({"error": "menu_inconsistent", "details": str(e),
                    "node_id": e.node_id, "parent_id": e.parent_id}), 409


def _is_descendant(org_id, candidate_id, ancestor_id):
    """True when ``candidate_id`` sits somewhere below ``ancestor_id``."""
    parents = {r.id: r.parent_id for r in _org_rows(org_id)}
    seen = set()
    cur = candidate_id
    while cur is not None and cur not in seen:
        if cur == ancestor_id:
            return True
        seen.add(cur)
        cur = parents.get(cur)
    return False


def _apply(form, item, present):
    for name in FIELDS:
        if name in present:
            value = getattr(form, name).data
            if isinstance(value, str):
                value = value.strip() or None
            setattr(item, name, value)
    if "allowed_roles" in present:
        item.allowed_roles = form.allowed_role_codes()
    if "is_active" in present:
        item.is_active = bool(form.is_active.data)
    if item.sort_order is None:
        item.sort_order = 0


@bp.get("/me")
@login_required
def my_menus():
    try:
        forest = _org_forest(current_user.org_id)
        visible = resolve_visible_menu(forest, current_context())
    except MalformedMenuNode as e:
        return _inconsistent(e)
    return jsonify({
        "menus": [n.to_dict() for n in visible],
        "sections": {k: [n.to_dict() for n in v] for k, v in group_by_section(visible).items()},
    })


@bp.get("")
@login_required
@menus_admin_required
def list_menus():
    try:
        forest = build_menu_forest([r.to_row() for r in _org_rows(current_user.org_id)])
    except MalformedMenuNode as e:
        return _inconsistent(e)
    return jsonify({"menus": [n.to_dict() for n in forest]})


@bp.post("")
@login_required
@menus_admin_required
def create_menu():
    data = request_formdata()
    form = MenuItemForm(formdata=data)
    if not form.validate():
        return validation_error(form)
    if form.parent_id.data is not None and not MenuItem.query.filter_by(
            id=form.parent_id.data, org_id=current_user.org_id).first():
        return jsonify({"error": "validation_failed", "details": {"parent_id": ["Menu parent inconnu"]}}), 422

    item = MenuItem(org_id=current_user.org_id, is_active=True)
    _apply(form, item, set(data.keys()))
    item.section = item.section or "main"
    db.session.add(item)
    db.session.commit()
    return jsonify(item.to_row()), 201


@bp.patch("/<int:menu_id>")
@login_required
@menus_admin_required
def update_menu(menu_id):
    item = MenuItem.query.filter_by(id=menu_id, org_id=current_user.org_id).first_or_404()
    data = request_formdata()
    form = MenuItemUpdateForm(formdata=data)
    if not form.validate():
        return validation_error(form)
    if "name" in data and not form.name.data:
        return jsonify({"error": "validation_failed", "details": {"name": ["Nom requis"]}}), 422

    new_parent = form.parent_id.data
    if "parent_id" in data and new_parent is not None:
        if new_parent == menu_id:
            return jsonify({"error": "conflict", "details": "Un menu ne peut pas être son propre parent"}), 409
        if not MenuItem.query.filter_by(id=new_parent, org_id=current_user.org_id).first():
            return jsonify({"error": "validation_failed", "details": {"parent_id": ["Menu parent inconnu"]}}), 422
        if _is_descendant(current_user.org_id, new_parent, menu_id):
            return jsonify({"error": "conflict", "details": "Le parent choisi est un sous-menu de ce menu"}), 409

    _apply(form, item, set(data.keys()))
    db.session.commit()
    return jsonify(item.to_row())


@bp.delete("/<int:menu_id>")
@login_required
@menus_admin_required
def delete_menu(menu_id):
    item = MenuItem.query.filter_by(id=menu_id, org_id=current_user.org_id).first_or_404()
    # orphaned children move to the root
    MenuItem.query.filter_by(org_id=current_user.org_id, parent_id=item.id).update({"parent_id": None})
    db.session.delete(item)
    db.session.commit()
    return jsonify({"ok": True})


@bp.post("/reorder")
@login_required
@menus_admin_required
def reorder_menus():
    payload = request.get_json(silent=True) or {}
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return jsonify({"error": "validation_failed", "details": {"items": ["Liste attendue"]}}), 422

    rows = {r.id: r for r in _org_rows(current_user.org_id)}
    for entry in items:
        try:
            row = rows[int(entry["id"])]
            row.sort_order = int(entry.get("sort_order", row.sort_order or 0))
            if "parent_id" in entry:
                row.parent_id = int(entry["parent_id"]) if entry["parent_id"] is not None else None
        except (KeyError, TypeError, ValueError):
            db.session.rollback()
            return jsonify({"error": "validation_failed", "details": {"items": [f"Entrée invalide: {entry!r}"]}}), 422

    try:
        build_menu_forest([r.to_row() for r in rows.values()])
    except MalformedMenuNode as e:
        db.session.rollback()
        return _inconsistent(e)
    db.session.commit()
    return jsonify({"success": True})
