"""
Wires the security package into the application factory.
"""

from flask import Flask

from quizhub.config import config

from .security_headers import SecurityHeaders


def init_security(app: Flask):
    """
    Attach security headers and report the rate-limit settings in effect.

    Args:
        app: Flask application instance
    """
    SecurityHeaders.init_app(app)

    if config.RATE_LIMIT_ENABLED:
        app.logger.info(
            f"Rate limiting on: {config.LOGIN_RATE_LIMIT} requests per "
            f"{config.LOGIN_RATE_WINDOW_SECONDS}s for login and username lookup"
        )
    else:
        app.logger.warning("Rate limiting is disabled")
