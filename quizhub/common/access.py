"""
Request-scoped caller identity and the row-level access rules built on it.

The caller is resolved once per request from the Flask-Login session and
then passed explicitly into every service function.
"""
from dataclasses import dataclass
from functools import wraps

from flask import g, request
from flask_login import current_user

from quizhub.auth.models import Role
from quizhub.errors import AccessDeniedError, AuthenticationError


@dataclass(frozen=True)
class Caller:
    id: int
    role: Role
    is_active: bool = True

    @property
    def is_student(self) -> bool:
        return self.role is Role.STUDENT

    @property
    def is_tutor_or_admin(self) -> bool:
        return self.role.is_tutor_or_admin

    @property
    def is_super_tutor(self) -> bool:
        return self.role.is_super_tutor

    @classmethod
    def from_user(cls, user) -> "Caller":
        return cls(id=user.id, role=user.role, is_active=user.is_active)

    def can_read_student(self, student_id: int) -> bool:
        """Own rows, or any row for tutors and super tutors."""
        return self.id == student_id or self.is_tutor_or_admin

    def require_student_access(self, student_id: int) -> None:
        if not self.can_read_student(student_id):
            raise AccessDeniedError()

    def require_tutor(self) -> None:
        if not self.is_tutor_or_admin:
            raise AccessDeniedError()

    def require_super_tutor(self) -> None:
        if not self.is_super_tutor:
            raise AccessDeniedError()


def get_caller() -> Caller:
    """Resolve the caller for the current request, caching it on flask.g."""
    caller = g.get('caller')
    if caller is not None:
        return caller
    if not current_user.is_authenticated:
        raise AuthenticationError("Authentication required")
    if not current_user.is_active:
        raise AuthenticationError("Account is deactivated")
    caller = Caller.from_user(current_user)
    g.caller = caller
    return caller


def get_optional_caller() -> Caller | None:
    if not current_user.is_authenticated:
        return None
    return get_caller()


def role_required(*roles: Role):
    """Decorator to require one of the given roles for a route."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            caller = get_caller()
            if caller.role not in roles:
                from quizhub.security import SecurityLogger
                SecurityLogger.log_access_denied(request.path, caller.id, caller.role.value)
                raise AccessDeniedError()
            return f(*args, **kwargs)
        return decorated_function
    return decorator


tutor_required = role_required(Role.TUTOR, Role.SUPER_TUTOR)
super_tutor_required = role_required(Role.SUPER_TUTOR)
