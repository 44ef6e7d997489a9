"""
User management.

Everyone can read and edit their own profile. Tutors can read every user;
only super tutors can change roles, activation state or login identity.
"""
from flask import current_app
from sqlalchemy import func, or_

from quizhub import db
from quizhub.auth import service as auth_service
from quizhub.auth.models import Role, User
from quizhub.auth.utils import is_valid_email, is_valid_username
from quizhub.common.responses import as_float, iso, parse_bool, text_value
from quizhub.errors import AccessDeniedError, ConflictError, NotFoundError, ValidationError
from quizhub.quiz.models import QuizAttempt
from quizhub.security import SecurityLogger

SELF_EDITABLE_FIELDS = ('first_name', 'last_name', 'avatar_url')
ADMIN_ONLY_FIELDS = ('role', 'is_active', 'username', 'email')


def _visible_user(caller, user: User | None) -> User:
    if user is None or not (user.id == caller.id or caller.is_tutor_or_admin):
        raise NotFoundError("User not found")
    return user


def list_users(caller, role=None, search=None, include_inactive=False) -> list[dict]:
    caller.require_tutor()

    query = User.query
    if not parse_bool(include_inactive):
        query = query.filter(User.is_active.is_(True))
    if role:
        try:
            query = query.filter(User.role == Role.parse(role))
        except ValueError:
            raise ValidationError(f"Invalid role: {role}")
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
            User.username.ilike(pattern),
        ))

    users = query.order_by(User.first_name, User.last_name, User.id).all()
    return [u.to_dict(include_email=caller.is_super_tutor) for u in users]


def get_user(caller, user_id: int) -> dict:
    user = _visible_user(caller, db.session.get(User, user_id))
    return user.to_dict(include_email=caller.is_super_tutor or user.id == caller.id)


def get_user_by_username(caller, username: str) -> dict:
    username = (username or "").strip()
    user = User.query.filter(
        func.lower(User.username) == username.lower(), User.is_active.is_(True)
    ).first()
    user = _visible_user(caller, user)
    return user.to_dict(include_email=caller.is_super_tutor or user.id == caller.id)


def create_user(caller, data: dict) -> dict:
    caller.require_super_tutor()
    user = auth_service.create_user(
        email=data.get('email'),
        password=data.get('password') or "",
        username=data.get('username'),
        first_name=data.get('first_name'),
        last_name=data.get('last_name'),
        role=data.get('role'),
        caller=caller,
    )
    return user.to_dict(include_email=True)


def update_user(caller, user_id: int, data: dict) -> dict:
    """
    Apply a profile update.

    Role, activation state, username and email are super tutor only, and a
    super tutor cannot change their own role or deactivate themselves.
    """
    user = _visible_user(caller, db.session.get(User, user_id))
    is_self = user.id == caller.id

    if not is_self and not caller.is_super_tutor:
        raise AccessDeniedError()
    if any(field in data for field in ADMIN_ONLY_FIELDS) and not caller.is_super_tutor:
        raise AccessDeniedError("You cannot change your own role or account status")

    for field in SELF_EDITABLE_FIELDS:
        if field in data:
            value = data.get(field)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"{field} must be a string")
            value = (value or "").strip()
            if field == 'avatar_url':
                value = value or None
            setattr(user, field, value)

    if 'email' in data:
        email = text_value(data.get("email"), "Email").lower()
        if not is_valid_email(email):
            raise ValidationError("Please provide a valid email address")
        if User.query.filter(User.email == email, User.id != user.id).first():
            raise ConflictError("User with this email already exists")
        user.email = email

    if 'username' in data:
        username = text_value(data.get("username"), "Username")
        if not is_valid_username(username):
            raise ValidationError("Username must be 3-50 characters: letters, digits, '_', '.' or '-'")
        taken = User.query.filter(func.lower(User.username) == username.lower(), User.id != user.id).first()
        if taken:
            raise ConflictError(f"Username {username} already exists. Please choose a different username.")
        user.username = username

    if 'role' in data:
        try:
            new_role = Role.parse(data.get('role'))
        except ValueError:
            valid = ", ".join(r.value for r in Role)
            raise ValidationError(f"Invalid role. Must be one of: {valid}")
        if new_role is not user.role:
            if is_self:
                raise ValidationError("You cannot change your own role")
            SecurityLogger.log_role_change(caller.id, user.id, user.role.value, new_role.value)
            user.role = new_role

    if 'is_active' in data:
        active = parse_bool(data.get('is_active'), user.is_active)
        if is_self and not active:
            raise ValidationError("You cannot deactivate your own account")
        user.is_active = active

    db.session.commit()
    return user.to_dict(include_email=True)


def deactivate_user(caller, user_id: int) -> None:
    caller.require_super_tutor()
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.id == caller.id:
        raise ValidationError("You cannot deactivate your own account")
    user.is_active = False
    db.session.commit()
    current_app.logger.info(f"User {user_id} deactivated by super tutor {caller.id}")


def get_students_for_tutor(caller) -> list[dict]:
    """Active students with their completed-attempt statistics."""
    caller.require_tutor()

    stats = db.session.query(
        QuizAttempt.student_id.label('student_id'),
        func.count(QuizAttempt.id).label('total_attempts'),
        func.avg(QuizAttempt.score).label('average_score'),
        func.max(QuizAttempt.completed_at).label('last_activity'),
    ).filter(QuizAttempt.is_completed.is_(True)) \
        .group_by(QuizAttempt.student_id).subquery()

    rows = db.session.query(
        User, stats.c.total_attempts, stats.c.average_score, stats.c.last_activity
    ).outerjoin(stats, stats.c.student_id == User.id) \
        .filter(User.role == Role.STUDENT, User.is_active.is_(True)) \
        .order_by(User.first_name, User.last_name, User.id).all()

    students = []
    for user, total_attempts, average_score, last_activity in rows:
        students.append({
            'id': user.id,
            'username': user.username,
            'first_name': user.first_name,
            'last_name': user.last_name,
            'created_at': iso(user.created_at),
            'total_attempts': total_attempts or 0,
            'average_score': as_float(average_score),
            'last_activity': iso(last_activity),
        })
    return students
