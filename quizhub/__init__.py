from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from dotenv import load_dotenv
from flask_migrate import Migrate
from flask_compress import Compress
from werkzeug.routing import IntegerConverter

# Load environment variables early so config is available for blueprint creation
load_dotenv()

from quizhub.config import config

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
compress = Compress()


class IdConverter(IntegerConverter):
    """`<int:...>` converter capped at the signed 64-bit maximum."""

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault("max", 2 ** 63 - 1)
        super().__init__(map, *args, **kwargs)


def create_app() -> Flask:
    """
    Application factory for the Flask app.
    Loads environment variables, configures the database,
    and registers blueprints.
    """
    # Re-read config so the latest environment values are used
    config.load()
    config.validate()

    app = Flask(__name__)
    # Ids in URLs stay within the database integer range
    app.url_map.converters["int"] = IdConverter

    app.config["SECRET_KEY"] = config.SECRET_KEY
    app.config["SQLALCHEMY_DATABASE_URI"] = config.SQLALCHEMY_DATABASE_URI
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = config.SQLALCHEMY_TRACK_MODIFICATIONS
    app.config["SQLALCHEMY_ECHO"] = config.SQLALCHEMY_ECHO
    if not config.is_sqlite:
        # Connection pooling for server databases
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
            "pool_size": 10,
            "pool_recycle": 3600,
            "pool_pre_ping": True,
            "max_overflow": 20,
        }

    app.config["COMPRESS_MIMETYPES"] = ['application/json']
    app.config["COMPRESS_LEVEL"] = 6
    app.config["COMPRESS_MIN_SIZE"] = 500
    app.config["SESSION_COOKIE_SECURE"] = config.SESSION_COOKIE_SECURE
    app.config["SESSION_COOKIE_HTTPONLY"] = config.SESSION_COOKIE_HTTPONLY
    app.config["SESSION_COOKIE_SAMESITE"] = config.SESSION_COOKIE_SAMESITE
    # Largest bucket limit plus multipart overhead
    app.config["MAX_CONTENT_LENGTH"] = 52 * 1024 * 1024

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    compress.init_app(app)

    from quizhub.security import init_security
    init_security(app)

    @login_manager.user_loader
    def load_user(user_id):
        from quizhub.auth.models import User
        try:
            return db.session.get(User, int(user_id))
        except (ValueError, TypeError):
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'error': 'Authentication required'}), 401

    @app.route("/health")
    def health():
        return jsonify({'status': 'ok'}), 200

    register_error_handlers(app)

    # Register blueprints
    from quizhub.auth import auth_bp
    from quizhub.content import content_bp
    from quizhub.quiz import quiz_bp
    from quizhub.feedback import feedback_bp
    from quizhub.users import users_bp
    from quizhub.storage import storage_bp
    app.register_blueprint(auth_bp)
    app.register_blueprint(content_bp)
    app.register_blueprint(quiz_bp)
    app.register_blueprint(feedback_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(storage_bp)

    from quizhub.cli import register_commands
    register_commands(app)

    # Create tables if they do not exist
    with app.app_context():
        from quizhub.auth import models as auth_models  # noqa: F401
        from quizhub.content import models as content_models  # noqa: F401
        from quizhub.quiz import models as quiz_models  # noqa: F401
        from quizhub.feedback import models as feedback_models  # noqa: F401
        from quizhub.storage import models as storage_models  # noqa: F401
        db.create_all()

    app.logger.info("QuizHub application created")
    return app


def register_error_handlers(app: Flask) -> None:
    """Every API error leaves as a {success: false, error} envelope."""
    from quizhub.errors import QuizHubError

    @app.errorhandler(QuizHubError)
    def handle_domain_error(e):
        db.session.rollback()
        return jsonify({'success': False, 'error': e.message}), e.status_code

    @app.errorhandler(404)
    def handle_404(e):
        app.logger.warning(f"404 error: {request.method} {request.path}")
        return jsonify({
            'success': False,
            'error': f'Route not found: {request.method} {request.path}',
        }), 404

    @app.errorhandler(405)
    def handle_405(e):
        app.logger.warning(f"405 error: {request.method} {request.path}")
        return jsonify({
            'success': False,
            'error': f'Method not allowed: {request.method} {request.path}',
        }), 405

    @app.errorhandler(413)
    def handle_413(e):
        return jsonify({'success': False, 'error': 'The object exceeded the maximum allowed size'}), 413

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        from werkzeug.exceptions import HTTPException
        if isinstance(e, HTTPException):
            return jsonify({'success': False, 'error': e.description}), e.code
        db.session.rollback()
        app.logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500
