from flask import Blueprint

bp = Blueprint("enrollment", __name__, url_prefix="/api/enrollments")

from . import routes  # noqa: E402,F401
