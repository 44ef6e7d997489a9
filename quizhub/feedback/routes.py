from flask import request
from flask_login import login_required

from quizhub.common.access import get_caller, super_tutor_required, tutor_required
from quizhub.common.responses import get_json_body, success
from quizhub.feedback import feedback_bp
from quizhub.feedback import service


@feedback_bp.route('/feedback', methods=['GET'])
@login_required
def list_feedback():
    return success(service.list_feedback(
        get_caller(),
        student_id=request.args.get('student_id'),
        attempt_id=request.args.get('attempt_id'),
    ))


@feedback_bp.route('/feedback/<int:feedback_id>', methods=['GET'])
@login_required
def get_feedback(feedback_id):
    return success(service.get_feedback(get_caller(), feedback_id).to_dict())


@feedback_bp.route('/feedback', methods=['POST'])
@login_required
@tutor_required
def create_feedback():
    """
    Request body:
    {
        "attempt_id": 12,
        "feedback_text": "Good work on irregular verbs",
        "recommendations": "Review the past perfect",
        "rating": 4
    }
    """
    return success(service.create_feedback(get_caller(), get_json_body()), 201,
                   message='Feedback created successfully')


@feedback_bp.route('/feedback/<int:feedback_id>', methods=['PUT', 'PATCH'])
@login_required
def update_feedback(feedback_id):
    return success(service.update_feedback(get_caller(), feedback_id, get_json_body()),
                   message='Feedback updated successfully')


@feedback_bp.route('/feedback/<int:feedback_id>', methods=['DELETE'])
@login_required
@super_tutor_required
def delete_feedback(feedback_id):
    service.delete_feedback(get_caller(), feedback_id)
    return success(None, message='Feedback deleted successfully')


@feedback_bp.route('/student-feedback', methods=['GET'])
@login_required
def list_student_feedback():
    return success(service.list_student_feedback(get_caller(), attempt_id=request.args.get('attempt_id')))


@feedback_bp.route('/student-feedback', methods=['POST'])
@login_required
def create_student_feedback():
    return success(service.create_student_feedback(get_caller(), get_json_body()), 201,
                   message='Feedback sent successfully')


@feedback_bp.route('/student-feedback/<int:feedback_id>', methods=['PUT', 'PATCH'])
@login_required
def update_student_feedback(feedback_id):
    return success(service.update_student_feedback(get_caller(), feedback_id, get_json_body()))
