from flask import Blueprint

bp = Blueprint("medication", __name__, url_prefix="/api/medications")

from . import routes  # noqa: E402,F401
