"""
User management module: profiles, role administration and the tutor's
student roster.
"""
from flask import Blueprint

users_bp = Blueprint('users', __name__, url_prefix='/api/users')

from quizhub.users import routes  # noqa: E402,F401
