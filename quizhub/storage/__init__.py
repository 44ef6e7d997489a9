"""
Object storage module: bucketed file uploads on the local filesystem with
per-bucket size, content-type and ownership rules.
"""
from flask import Blueprint

storage_bp = Blueprint('storage', __name__, url_prefix='/api/storage')

from quizhub.storage import routes  # noqa: E402,F401
