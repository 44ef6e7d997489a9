"""
Account operations: registration, credential checks and username lookups.
"""
from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from quizhub import db
from quizhub.auth.models import Role, User
from quizhub.auth.utils import hash_password, is_valid_email, is_valid_username, verify_password
from quizhub.common.responses import text_value
from quizhub.errors import AccessDeniedError, ConflictError, NotFoundError, ValidationError
from quizhub.security import PasswordValidator


def _username_taken(username: str) -> bool:
    return db.session.query(User.id).filter(
        func.lower(User.username) == username.lower()
    ).first() is not None


def create_user(email: str, password: str, username: str, first_name: str = "",
                last_name: str = "", role=Role.STUDENT, caller=None) -> User:
    """
    Create an account.

    Self-registration always yields a student; only a super tutor may create
    tutors or other super tutors.
    """
    email = text_value(email, "Email").lower()
    username = text_value(username, "Username") or email.split("@")[0]
    first_name = text_value(first_name, "First name")
    last_name = text_value(last_name, "Last name")
    if password is not None and not isinstance(password, str):
        raise ValidationError("Password must be a string")

    if not email or not password:
        raise ValidationError("Email and password are required")
    if not is_valid_email(email):
        raise ValidationError("Please provide a valid email address")
    if not is_valid_username(username):
        raise ValidationError("Username must be 3-50 characters: letters, digits, '_', '.' or '-'")

    try:
        role = Role.parse(role or Role.STUDENT)
    except ValueError:
        valid = ", ".join(r.value for r in Role)
        raise ValidationError(f"Invalid role. Must be one of: {valid}")
    if role is not Role.STUDENT and (caller is None or not caller.is_super_tutor):
        raise AccessDeniedError("Only a super tutor can create tutor accounts")

    ok, errors = PasswordValidator.from_config().validate(password)
    if not ok:
        raise ValidationError(errors[0])

    if User.query.filter_by(email=email).first():
        raise ConflictError("User with this email already exists")
    if _username_taken(username):
        raise ConflictError(f"Username {username} already exists. Please choose a different username.")

    user = User(
        email=email,
        username=username,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Username {username} already exists. Please choose a different username.")

    current_app.logger.info(f"User created: id={user.id}, username={user.username}, role={role.value}")
    return user


def get_email_from_username(username: str) -> dict:
    """Resolve an active user's username to their login email."""
    username = text_value(username, "Username")
    if not username:
        raise ValidationError("Username is required")

    user = User.query.filter_by(username=username, is_active=True).first()
    if user is None:
        raise NotFoundError("Username not found")
    if not user.email:
        raise NotFoundError("User email not found")
    return {"email": user.email, "user_id": user.id}


def check_username_availability(username: str) -> dict:
    username = text_value(username, "Username")
    if not username:
        raise ValidationError("Username is required")
    return {"available": not _username_taken(username), "username": username}


def authenticate(identifier: str, password: str) -> User | None:
    """
    Check credentials given an email or a username.

    Returns the user, or None when the identifier is unknown, the user is
    inactive or the password does not match.
    """
    identifier = text_value(identifier, "Identifier")
    if "@" in identifier:
        email = identifier.lower()
    else:
        try:
            email = get_email_from_username(identifier)["email"]
        except NotFoundError:
            return None

    user = User.query.filter_by(email=email).first()
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
