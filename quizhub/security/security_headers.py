"""
Security headers module.

Adds security headers to every JSON and file response.
"""

from flask import request, current_app


class SecurityHeaders:
    """
    Security headers middleware.
    """

    @staticmethod
    def init_app(app):
        @app.after_request
        def add_security_headers(response):
            # The API serves JSON and stored objects only
            response.headers['Content-Security-Policy'] = (
                "default-src 'none'; "
                "img-src 'self' data:; "
                "media-src 'self'; "
                "frame-ancestors 'self'; "
                "base-uri 'none'; "
                "form-action 'none';"
            )
            response.headers['X-Content-Type-Options'] = 'nosniff'

            # Stored objects may be embedded by the client application
            if request.endpoint == 'storage.download_object':
                response.headers['X-Frame-Options'] = 'SAMEORIGIN'
            else:
                response.headers['X-Frame-Options'] = 'DENY'

            response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
            response.headers['Permissions-Policy'] = (
                "geolocation=(), microphone=(), camera=(), payment=(), usb=()"
            )

            if current_app.config.get('SESSION_COOKIE_SECURE', False):
                response.headers['Strict-Transport-Security'] = (
                    'max-age=31536000; includeSubDomains'
                )

            if request.path.startswith('/api/') and request.endpoint != 'storage.download_object':
                response.cache_control.no_store = True

            return response
