from functools import wraps
from flask import abort, current_app
from flask_login import current_user

from ..services.access import AccessRule, RoleContext, is_access_allowed
from ..services.errors import InvalidContext
from ..services.navigation import ADMIN_UP, HR_UP


def current_context():
    """RoleContext for the logged-in user, or None when the stored role is unusable."""
    if not current_user.is_authenticated:
        return None
    try:
        return RoleContext.from_user(current_user)
    except InvalidContext:
        current_app.logger.warning('user %s has an unknown role %r', current_user.id, current_user.role)
        return None


def permission_required(*permissions, roles=()):
    """Allow the view when the user holds any of ``permissions`` or one of ``roles``.

    Super-admins always pass.
    """
    rule = AccessRule(",".join(permissions) or None, tuple(roles))

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401)
            ctx = current_context()
            if ctx is None or not is_access_allowed(rule, ctx):
                abort(403)
            return view(*args, **kwargs)
        return wrapped
    return decorator


admin_required = permission_required("system.admin", roles=ADMIN_UP)
menus_admin_required = permission_required("roles.manage", roles=ADMIN_UP)
recruiter_required = permission_required("recruitment.manage", roles=HR_UP)
