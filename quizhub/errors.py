"""
Domain errors raised by the service layer.

Each error carries the message shown to the client verbatim and the HTTP
status the app-level error handler responds with.
"""


class QuizHubError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(QuizHubError):
    status_code = 400


class AuthenticationError(QuizHubError):
    status_code = 401


class AccessDeniedError(QuizHubError):
    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFoundError(QuizHubError):
    status_code = 404


class ConflictError(QuizHubError):
    status_code = 409


class AlreadyCompletedError(QuizHubError):
    status_code = 400


class PayloadTooLargeError(QuizHubError):
    status_code = 413
