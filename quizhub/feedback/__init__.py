"""
Feedback module: tutor feedback on student attempts and student feedback
addressed to tutors.
"""
from flask import Blueprint

feedback_bp = Blueprint('feedback', __name__, url_prefix='/api')

from quizhub.feedback import routes  # noqa: E402,F401
