"""
Rate limiting for the login and username-lookup endpoints.

Request timestamps are kept in memory per client identifier and checked
against a sliding window.
"""

from functools import wraps
from collections import defaultdict
import threading
import time

from flask import request, jsonify, current_app, make_response

from quizhub.config import config


class RateLimiter:
    """
    Sliding-window rate limiter keyed by IP address or user.
    """

    def __init__(self, cleanup_interval: int = 3600):
        self._storage = defaultdict(list)
        self._lock = threading.Lock()
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = time.time()

    def _cleanup_old_entries(self, now: float):
        if now - self._last_cleanup < self._cleanup_interval:
            return

        with self._lock:
            cutoff = now - self._cleanup_interval
            for key in list(self._storage):
                self._storage[key] = [ts for ts in self._storage[key] if ts > cutoff]
                if not self._storage[key]:
                    del self._storage[key]
            self._last_cleanup = now

    def is_allowed(self, identifier: str, max_requests: int, window_seconds: int,
                   now: float | None = None) -> tuple[bool, int]:
        """
        Record a request and report whether it fits in the window.

        Returns:
            Tuple of (is_allowed, remaining_requests)
        """
        now = time.time() if now is None else now
        self._cleanup_old_entries(now)
        cutoff = now - window_seconds

        with self._lock:
            timestamps = self._storage[identifier]
            timestamps[:] = [ts for ts in timestamps if ts > cutoff]

            if len(timestamps) >= max_requests:
                return False, 0

            timestamps.append(now)
            return True, max_requests - len(timestamps)

    def reset(self, identifier: str | None = None):
        """Forget one identifier, or everything when none is given."""
        with self._lock:
            if identifier is None:
                self._storage.clear()
            else:
                self._storage.pop(identifier, None)


# Global rate limiter instance
_rate_limiter = RateLimiter()


def get_rate_limiter() -> RateLimiter:
    return _rate_limiter


def _client_identifier(per: str) -> str:
    if per == 'user':
        from flask_login import current_user
        if current_user.is_authenticated:
            return f"user:{current_user.id}"
    ip = request.remote_addr or request.environ.get('REMOTE_ADDR', 'unknown')
    return f"ip:{ip}"


def rate_limit(scope: str, per: str = 'ip',
               error_message: str = "Too many attempts. Please try again later."):
    """
    Rate limit a route using LOGIN_RATE_LIMIT requests per
    LOGIN_RATE_WINDOW_SECONDS. Limits are read at request time.

    Example:
        @auth_bp.route('/login', methods=['POST'])
        @rate_limit('login')
        def login():
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not config.RATE_LIMIT_ENABLED:
                return f(*args, **kwargs)

            max_requests = config.LOGIN_RATE_LIMIT
            window_seconds = config.LOGIN_RATE_WINDOW_SECONDS
            identifier = f"{scope}:{_client_identifier(per)}"

            allowed, remaining = _rate_limiter.is_allowed(identifier, max_requests, window_seconds)
            reset_at = str(int(time.time()) + window_seconds)

            if not allowed:
                from quizhub.security.security_logger import SecurityLogger
                SecurityLogger.log_rate_limit_exceeded(identifier, request.path)
                response = make_response(jsonify({
                    'success': False,
                    'error': error_message,
                    'retry_after': window_seconds
                }), 429)
                response.headers['X-RateLimit-Limit'] = str(max_requests)
                response.headers['X-RateLimit-Remaining'] = '0'
                response.headers['X-RateLimit-Reset'] = reset_at
                return response

            response = make_response(f(*args, **kwargs))
            response.headers['X-RateLimit-Limit'] = str(max_requests)
            response.headers['X-RateLimit-Remaining'] = str(remaining)
            response.headers['X-RateLimit-Reset'] = reset_at
            current_app.logger.debug(f"[RATE LIMIT] {identifier} remaining={remaining}")
            return response

        return decorated_function
    return decorator
