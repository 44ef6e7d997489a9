from flask import request
from flask_login import login_required

from quizhub.common.access import get_caller, super_tutor_required, tutor_required
from quizhub.common.responses import get_json_body, success
from quizhub.users import users_bp
from quizhub.users import service


@users_bp.route('', methods=['GET'])
@login_required
@tutor_required
def list_users():
    """
    Query params: role, search, include_inactive.
    """
    return success(service.list_users(
        get_caller(),
        role=request.args.get('role'),
        search=request.args.get('search'),
        include_inactive=request.args.get('include_inactive'),
    ))


@users_bp.route('', methods=['POST'])
@login_required
@super_tutor_required
def create_user():
    return success(service.create_user(get_caller(), get_json_body()), 201,
                   message='User created successfully')


@users_bp.route('/students', methods=['GET'])
@login_required
@tutor_required
def list_students():
    return success(service.get_students_for_tutor(get_caller()))


@users_bp.route('/by-username/<username>', methods=['GET'])
@login_required
def get_user_by_username(username):
    return success(service.get_user_by_username(get_caller(), username))


@users_bp.route('/<int:user_id>', methods=['GET'])
@login_required
def get_user(user_id):
    return success(service.get_user(get_caller(), user_id))


@users_bp.route('/<int:user_id>', methods=['PUT', 'PATCH'])
@login_required
def update_user(user_id):
    return success(service.update_user(get_caller(), user_id, get_json_body()),
                   message='User updated successfully')


@users_bp.route('/<int:user_id>', methods=['DELETE'])
@login_required
@super_tutor_required
def deactivate_user(user_id):
    service.deactivate_user(get_caller(), user_id)
    return success(None, message='User deactivated successfully')
