"""
Security module for the application.

This module provides:
- Rate limiting
- Password strength validation
- Security headers
- Security logging
"""

from .rate_limiter import RateLimiter, rate_limit, get_rate_limiter
from .password_validator import PasswordValidator
from .security_headers import SecurityHeaders
from .security_logger import SecurityLogger
from .security_init import init_security

__all__ = [
    'RateLimiter',
    'rate_limit',
    'get_rate_limiter',
    'PasswordValidator',
    'SecurityHeaders',
    'SecurityLogger',
    'init_security',
]
