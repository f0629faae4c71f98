from flask import Blueprint

bp = Blueprint("menus", __name__)

from . import routes  # noqa: E402,F401
