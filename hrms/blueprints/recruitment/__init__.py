from flask import Blueprint

bp = Blueprint("recruitment", __name__)

from . import routes  # noqa: E402,F401
