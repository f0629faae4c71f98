from flask import abort, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from . import bp
from ...extensions import db
from .forms import LoginForm, SignupForm
from ...models.organization import Organization
from ...models.role import Role
from ...models.user import User
from ...services.access import AccessRule, RoleCode, RoleContext, is_access_allowed
from ...services.errors import InvalidContext
from ...services.navigation import ADMIN_UP
from ...utils.decorators import current_context
from ...utils.forms import request_formdata, validation_error

CREATE_USERS = AccessRule("users.create", ADMIN_UP)


def _user_payload(user):
    try:
        ctx = RoleContext.from_user(user)
    except InvalidContext:
        ctx = None
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "org_id": user.org_id,
        "role": user.role,
        "permissions": user.permission_names(),
        "is_super_admin": bool(ctx and ctx.is_super_admin),
    }


@bp.post("/login")
def login():
    form = LoginForm(formdata=request_formdata())
    if not form.validate():
        return validation_error(form)
    user = User.query.filter_by(email=form.email.data).first()
    if not user or not user.check_password(form.password.data):
        return jsonify({"error": "invalid_credentials"}), 401
    login_user(user)
    return jsonify(_user_payload(user))


@bp.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


@bp.get("/me")
@login_required
def me():
    return jsonify(_user_payload(current_user))


@bp.post("/signup")
def signup():
    """First call: creates the organisation and its super-admin. Afterwards: admins add users."""
    form = SignupForm(formdata=request_formdata())
    user_exists = User.query.first() is not None
    if user_exists:
        if not current_user.is_authenticated:
            abort(401)
        ctx = current_context()
        if ctx is None or not is_access_allowed(CREATE_USERS, ctx):
            abort(403)

    if not form.validate():
        return validation_error(form)
    if User.query.filter_by(email=form.email.data).first():
        return jsonify({"error": "email_taken"}), 409

    if user_exists:
        org_id = current_user.org_id
        role = form.role.data
        # only a super-admin may mint another super-admin
        if role == RoleCode.SUPER_ADMIN.value and not current_context().is_super_admin:
            abort(403)
    else:
        if not form.org_name.data:
            return jsonify({"error": "validation_failed", "details": {"org_name": ["Organisation requise"]}}), 422
        org = Organization.query.filter_by(name=form.org_name.data).first()
        if not org:
            org = Organization(name=form.org_name.data)
            db.session.add(org)
            db.session.flush()
        org_id = org.id
        role = RoleCode.SUPER_ADMIN.value

    role_id = form.role_id.data
    if role_id is not None and not Role.query.filter_by(id=role_id, org_id=org_id).first():
        return jsonify({"error": "validation_failed", "details": {"role_id": ["Rôle inconnu"]}}), 422

    user = User(org_id=org_id, email=form.email.data, full_name=form.full_name.data,
                role=role, role_id=role_id)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    return jsonify({"id": user.id, "email": user.email, "org_id": org_id, "role": role}), 201
