"""
Password strength validation used at registration and when a super tutor
creates or resets an account.
"""

import re
from typing import List, Tuple

from quizhub.config import config


class PasswordValidator:
    """
    Password strength validator.

    Character-class rules can be switched off as a group through
    PASSWORD_REQUIRE_COMPLEXITY; the length and common-password checks
    always apply.
    """

    SPECIAL_CHARS = re.compile(r'[!@#$%^&*(),.?":{}|<>_\-]')

    COMMON_PASSWORDS = {
        'password', '123456', '12345678', '123456789', '1234567890',
        'qwerty', 'abc123', 'password1', 'welcome', 'letmein',
        'monkey', 'dragon', 'master', 'sunshine', 'princess',
        'football', 'iloveyou', 'admin', 'root', 'toor', 'student', 'teacher',
    }

    def __init__(self, min_length: int = 8, require_complexity: bool = True):
        self.min_length = min_length
        self.require_complexity = require_complexity

    @classmethod
    def from_config(cls) -> "PasswordValidator":
        return cls(
            min_length=config.MIN_PASSWORD_LENGTH,
            require_complexity=config.PASSWORD_REQUIRE_COMPLEXITY,
        )

    def validate(self, password: str) -> Tuple[bool, List[str]]:
        """
        Validate password strength.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        if not password or not isinstance(password, str):
            return False, ['Password is required']

        errors = []
        if len(password) < self.min_length:
            errors.append(f"Password must be at least {self.min_length} characters long")

        if password.lower() in self.COMMON_PASSWORDS:
            errors.append("Password is too common. Please choose a more unique password")

        if self.require_complexity:
            if not re.search(r'[A-Z]', password):
                errors.append("Password must contain at least one uppercase letter")
            if not re.search(r'[a-z]', password):
                errors.append("Password must contain at least one lowercase letter")
            if not re.search(r'\d', password):
                errors.append("Password must contain at least one digit")
            if not self.SPECIAL_CHARS.search(password):
                errors.append("Password must contain at least one special character")
            if re.search(r'(.)\1{3,}', password):
                errors.append("Password contains too many repeated characters")
            if self._has_sequential_chars(password):
                errors.append("Password contains sequential characters")

        return len(errors) == 0, errors

    @staticmethod
    def _has_sequential_chars(password: str) -> bool:
        """True for runs like '1234', 'abcd' or 'dcba'."""
        lowered = password.lower()
        for i in range(len(lowered) - 3):
            window = lowered[i:i + 4]
            if not (window.isdigit() or window.isalpha()):
                continue
            steps = {ord(window[j + 1]) - ord(window[j]) for j in range(3)}
            if steps == {1} or steps == {-1}:
                return True
        return False
