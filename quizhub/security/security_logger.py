"""
Security logging module.

Logs authentication, authorization and storage events through the
application logger for monitoring and auditing.
"""

from flask import request, current_app
from datetime import datetime


def _remote_addr() -> str:
    return request.remote_addr or 'unknown'


class SecurityLogger:
    """
    Security event logger.
    """

    @staticmethod
    def log_failed_login(identifier: str, reason: str = "Invalid credentials"):
        current_app.logger.warning(
            f"SECURITY: Failed login attempt - Identifier: {identifier}, "
            f"IP: {_remote_addr()}, Reason: {reason}, "
            f"Time: {datetime.utcnow().isoformat()}"
        )

    @staticmethod
    def log_successful_login(user_id: int, username: str):
        current_app.logger.info(
            f"SECURITY: Successful login - User ID: {user_id}, "
            f"Username: {username}, IP: {_remote_addr()}, "
            f"Time: {datetime.utcnow().isoformat()}"
        )

    @staticmethod
    def log_rate_limit_exceeded(identifier: str, endpoint: str):
        current_app.logger.warning(
            f"SECURITY: Rate limit exceeded - Identifier: {identifier}, "
            f"Endpoint: {endpoint}, IP: {_remote_addr()}, "
            f"Time: {datetime.utcnow().isoformat()}"
        )

    @staticmethod
    def log_access_denied(resource: str, user_id: int = None, role: str = None):
        """
        Log a request rejected by a role or ownership rule.

        Args:
            resource: What was accessed (usually the request path)
            user_id: Caller id if authenticated
            role: Caller role if authenticated
        """
        user_info = f"User ID: {user_id} ({role})" if user_id else "Unauthenticated"
        current_app.logger.warning(
            f"SECURITY: Access denied - {user_info}, "
            f"Resource: {resource}, IP: {_remote_addr()}, "
            f"Time: {datetime.utcnow().isoformat()}"
        )

    @staticmethod
    def log_role_change(actor_id: int, user_id: int, old_role: str, new_role: str):
        current_app.logger.info(
            f"SECURITY: Role changed - Actor: {actor_id}, User ID: {user_id}, "
            f"{old_role} -> {new_role}, Time: {datetime.utcnow().isoformat()}"
        )

    @staticmethod
    def log_storage_access(bucket: str, path: str, user_id: int | None, action: str, authorized: bool):
        status = "Authorized" if authorized else "Unauthorized"
        current_app.logger.info(
            f"SECURITY: Storage {action} - {status} - User ID: {user_id}, "
            f"Object: {bucket}/{path}, IP: {_remote_addr()}, "
            f"Time: {datetime.utcnow().isoformat()}"
        )
