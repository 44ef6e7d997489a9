"""
Quiz routes.

Students start and submit their own attempts; tutors can review any
student's results and see aggregate analytics.
"""
from flask import request
from flask_login import login_required

from quizhub.common.access import get_caller, tutor_required
from quizhub.common.responses import get_json_body, success
from quizhub.quiz import quiz_bp
from quizhub.quiz import service


@quiz_bp.route('/available', methods=['GET'])
@login_required
def available_quizzes():
    get_caller()
    return success(service.get_available_quizzes())


@quiz_bp.route('/attempts', methods=['POST'])
@login_required
def start_attempt():
    """
    Start or resume a quiz attempt.

    Request body:
    {
        "category_id": 1,
        "difficulty_id": 2,
        "question_count": 10
    }
    """
    data = get_json_body()
    result = service.start_quiz_attempt(
        get_caller(),
        student_id=data.get('student_id'),
        category_id=data.get('category_id'),
        difficulty_id=data.get('difficulty_id'),
        question_count=data.get('question_count'),
    )
    if result['resumed']:
        return success(result, 200, message='Resuming existing attempt')
    return success(result, 201, message='Quiz attempt started')


@quiz_bp.route('/attempts/<int:attempt_id>/submit', methods=['POST'])
@login_required
def submit_attempt(attempt_id):
    """
    Submit answers for an attempt.

    Request body:
    {
        "answers": [{"question_id": 5, "selected_option_id": 17}],
        "time_taken": 312
    }
    """
    data = get_json_body()
    result = service.submit_quiz_answers(
        get_caller(),
        attempt_id,
        data.get('answers', []),
        time_taken=data.get('time_taken'),
    )
    return success(result, message='Quiz submitted successfully')


@quiz_bp.route('/attempts/<int:attempt_id>/results', methods=['GET'])
@login_required
def attempt_results(attempt_id):
    return success(service.get_quiz_results(get_caller(), attempt_id))


@quiz_bp.route('/results', methods=['GET'])
@login_required
def list_results():
    return success(service.list_quiz_results(
        get_caller(),
        student_id=request.args.get('student_id'),
        category_id=request.args.get('category_id'),
        limit=request.args.get('limit'),
    ))


@quiz_bp.route('/progress/<int:student_id>', methods=['GET'])
@login_required
def student_progress(student_id):
    return success(service.get_student_progress(get_caller(), student_id))


@quiz_bp.route('/analytics', methods=['GET'])
@login_required
@tutor_required
def tutor_analytics():
    return success(service.get_tutor_analytics(get_caller()))
