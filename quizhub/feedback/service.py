"""
Feedback service.

Tutor feedback is readable by the student it concerns, the tutor who wrote
it and super tutors. Student feedback is readable by its student, the
addressed tutor and super tutors.
"""
from flask import current_app
from sqlalchemy import or_

from quizhub import db
from quizhub.auth.models import User
from quizhub.common.responses import parse_int
from quizhub.errors import AccessDeniedError, NotFoundError, ValidationError
from quizhub.feedback.models import Feedback, StudentFeedback
from quizhub.quiz.models import QuizAttempt


def _text(value, field: str, required: bool = True) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


def _rating(value) -> int | None:
    return parse_int(value, 'rating', required=False, minimum=1, maximum=5)


def _completed_attempt(attempt_id) -> QuizAttempt:
    attempt = db.session.get(QuizAttempt, parse_int(attempt_id, 'attempt_id'))
    if attempt is None:
        raise NotFoundError("Quiz attempt not found")
    if not attempt.is_completed:
        raise ValidationError("Feedback can only be given on a completed quiz attempt")
    return attempt


def _can_read(caller, row) -> bool:
    return caller.is_super_tutor or caller.id in (row.student_id, row.tutor_id)


# --- Tutor feedback -------------------------------------------------------

def list_feedback(caller, student_id=None, attempt_id=None) -> list[dict]:
    query = Feedback.query
    if caller.is_super_tutor:
        pass
    elif caller.is_tutor_or_admin:
        query = query.filter(or_(Feedback.tutor_id == caller.id, Feedback.student_id == caller.id))
    else:
        query = query.filter(Feedback.student_id == caller.id)

    student_id = parse_int(student_id, 'student_id', required=False)
    if student_id is not None:
        query = query.filter(Feedback.student_id == student_id)
    attempt_id = parse_int(attempt_id, 'attempt_id', required=False)
    if attempt_id is not None:
        query = query.filter(Feedback.attempt_id == attempt_id)

    return [f.to_dict() for f in query.order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()]


def get_feedback(caller, feedback_id: int) -> Feedback:
    feedback = db.session.get(Feedback, feedback_id)
    if feedback is None or not _can_read(caller, feedback):
        raise NotFoundError("Feedback not found")
    return feedback


def create_feedback(caller, data: dict) -> dict:
    caller.require_tutor()
    attempt = _completed_attempt(data.get('attempt_id'))
    feedback = Feedback(
        attempt_id=attempt.id,
        student_id=attempt.student_id,
        tutor_id=caller.id,
        feedback_text=_text(data.get('feedback_text'), 'Feedback text'),
        recommendations=_text(data.get('recommendations'), 'Recommendations', required=False),
        rating=_rating(data.get('rating')),
    )
    db.session.add(feedback)
    db.session.commit()
    current_app.logger.info(f"Feedback {feedback.id} created by tutor {caller.id} on attempt {attempt.id}")
    return feedback.to_dict()


def update_feedback(caller, feedback_id: int, data: dict) -> dict:
    feedback = get_feedback(caller, feedback_id)
    if feedback.tutor_id != caller.id and not caller.is_super_tutor:
        raise AccessDeniedError()

    if 'feedback_text' in data:
        feedback.feedback_text = _text(data.get('feedback_text'), 'Feedback text')
    if 'recommendations' in data:
        feedback.recommendations = _text(data.get('recommendations'), 'Recommendations', required=False)
    if 'rating' in data:
        feedback.rating = _rating(data.get('rating'))
    db.session.commit()
    return feedback.to_dict()


def delete_feedback(caller, feedback_id: int) -> None:
    caller.require_super_tutor()
    feedback = get_feedback(caller, feedback_id)
    db.session.delete(feedback)
    db.session.commit()
    current_app.logger.info(f"Feedback {feedback_id} deleted by user {caller.id}")


# --- Student feedback -----------------------------------------------------

def list_student_feedback(caller, attempt_id=None) -> list[dict]:
    query = StudentFeedback.query
    if not caller.is_super_tutor:
        query = query.filter(or_(StudentFeedback.student_id == caller.id, StudentFeedback.tutor_id == caller.id))
    attempt_id = parse_int(attempt_id, 'attempt_id', required=False)
    if attempt_id is not None:
        query = query.filter(StudentFeedback.attempt_id == attempt_id)
    return [f.to_dict() for f in query.order_by(StudentFeedback.created_at.desc(), StudentFeedback.id.desc()).all()]


def create_student_feedback(caller, data: dict) -> dict:
    attempt = _completed_attempt(data.get('attempt_id'))
    if attempt.student_id != caller.id:
        raise AccessDeniedError()

    tutor_id = parse_int(data.get('tutor_id'), 'tutor_id', required=False)
    if tutor_id is not None:
        tutor = db.session.get(User, tutor_id)
        if tutor is None or not tutor.is_active or not tutor.role.is_tutor_or_admin:
            raise ValidationError("Feedback must be addressed to a tutor")

    feedback = StudentFeedback(
        attempt_id=attempt.id,
        student_id=caller.id,
        tutor_id=tutor_id,
        feedback_text=_text(data.get('feedback_text'), 'Feedback text'),
        rating=_rating(data.get('rating')),
    )
    db.session.add(feedback)
    db.session.commit()
    return feedback.to_dict()


def update_student_feedback(caller, feedback_id: int, data: dict) -> dict:
    feedback = db.session.get(StudentFeedback, feedback_id)
    if feedback is None or not _can_read(caller, feedback):
        raise NotFoundError("Feedback not found")
    if feedback.student_id != caller.id:
        raise AccessDeniedError()

    if 'feedback_text' in data:
        feedback.feedback_text = _text(data.get('feedback_text'), 'Feedback text')
    if 'rating' in data:
        feedback.rating = _rating(data.get('rating'))
    db.session.commit()
    return feedback.to_dict()
