"""
Quiz module: starting, submitting and reviewing quiz attempts, plus
progress reporting for students and tutors.
"""
from flask import Blueprint

quiz_bp = Blueprint('quiz', __name__, url_prefix='/api/quizzes')

from quizhub.quiz import routes  # noqa: E402,F401
