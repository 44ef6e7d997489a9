from flask import request
from flask_login import login_required

from quizhub.common.access import get_caller, super_tutor_required, tutor_required
from quizhub.common.responses import get_json_body, parse_bool, success
from quizhub.content import content_bp
from quizhub.content import service


@content_bp.route('/categories', methods=['GET'])
@login_required
def list_categories():
    caller = get_caller()
    include_inactive = caller.is_tutor_or_admin and parse_bool(request.args.get('include_inactive'))
    return success(service.list_categories(include_inactive))


@content_bp.route('/categories', methods=['POST'])
@login_required
@tutor_required
def create_category():
    return success(service.create_category(get_caller(), get_json_body()), 201,
                   message='Category created successfully')


@content_bp.route('/categories/<int:category_id>', methods=['PUT', 'PATCH'])
@login_required
@tutor_required
def update_category(category_id):
    return success(service.update_category(get_caller(), category_id, get_json_body()),
                   message='Category updated successfully')


@content_bp.route('/categories/<int:category_id>', methods=['DELETE'])
@login_required
@tutor_required
def delete_category(category_id):
    service.delete_category(get_caller(), category_id)
    return success(None, message='Category deleted successfully')


@content_bp.route('/difficulty-levels', methods=['GET'])
@login_required
def list_difficulty_levels():
    caller = get_caller()
    include_inactive = caller.is_super_tutor and parse_bool(request.args.get('include_inactive'))
    return success(service.list_difficulty_levels(include_inactive))


@content_bp.route('/difficulty-levels', methods=['POST'])
@login_required
@super_tutor_required
def create_difficulty_level():
    return success(service.create_difficulty_level(get_caller(), get_json_body()), 201)


@content_bp.route('/difficulty-levels/<int:difficulty_id>', methods=['PUT', 'PATCH'])
@login_required
@super_tutor_required
def update_difficulty_level(difficulty_id):
    return success(service.update_difficulty_level(get_caller(), difficulty_id, get_json_body()))


@content_bp.route('/difficulty-levels/<int:difficulty_id>', methods=['DELETE'])
@login_required
@super_tutor_required
def delete_difficulty_level(difficulty_id):
    service.delete_difficulty_level(get_caller(), difficulty_id)
    return success(None, message='Difficulty level deleted successfully')


@content_bp.route('/questions', methods=['GET'])
@login_required
@tutor_required
def list_questions():
    """
    Question bank listing for authors.

    Query params: category_id, difficulty_id, search, page, limit.
    """
    return success(service.list_questions(
        category_id=request.args.get('category_id'),
        difficulty_id=request.args.get('difficulty_id'),
        search=request.args.get('search'),
        page=request.args.get('page'),
        limit=request.args.get('limit'),
    ))


@content_bp.route('/questions/<int:question_id>', methods=['GET'])
@login_required
@tutor_required
def get_question(question_id):
    return success(service.get_question(question_id).to_dict())


@content_bp.route('/questions', methods=['POST'])
@login_required
@tutor_required
def create_question():
    """
    Create a question with its options.

    Request body:
    {
        "category_id": 1,
        "difficulty_id": 1,
        "question_text": "What is the past tense of 'go'?",
        "explanation": "Irregular verb",
        "options": [
            {"option_text": "went", "is_correct": true},
            {"option_text": "goed", "is_correct": false}
        ]
    }
    """
    return success(service.create_question(get_caller(), get_json_body()), 201,
                   message='Question created successfully')


@content_bp.route('/questions/<int:question_id>', methods=['PUT', 'PATCH'])
@login_required
@tutor_required
def update_question(question_id):
    return success(service.update_question(get_caller(), question_id, get_json_body()),
                   message='Question updated successfully')


@content_bp.route('/questions/<int:question_id>', methods=['DELETE'])
@login_required
@tutor_required
def delete_question(question_id):
    service.delete_question(get_caller(), question_id)
    return success(None, message='Question deleted successfully')
