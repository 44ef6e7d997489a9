"""
Content module: categories, difficulty levels and questions that quizzes
are drawn from.
"""
from flask import Blueprint

content_bp = Blueprint('content', __name__, url_prefix='/api')

from quizhub.content import routes  # noqa: E402,F401
