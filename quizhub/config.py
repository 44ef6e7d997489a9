"""
Configuration module for the application.
All configuration values are read from environment variables,
typically loaded from a .env file.
"""
import os
import secrets
import warnings


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "")
    if not raw:
        return default
    return raw.strip().lower() == "true"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    return int(raw) if raw else default


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        self.load()

    def load(self) -> None:
        """(Re)read every setting from the environment."""
        # Flask Configuration
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "")
        self.FLASK_ENV: str = os.getenv("FLASK_ENV", "")

        # Generate a development SECRET_KEY if not set and in development mode
        if not self.SECRET_KEY and self.FLASK_ENV != "production":
            self.SECRET_KEY = secrets.token_urlsafe(32)
            warnings.warn(
                "SECRET_KEY not set. Generated a temporary key for development. "
                "Set SECRET_KEY in your .env file for production!",
                UserWarning
            )

        # Database Configuration
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "")
        self.DB_USER: str = os.getenv("DB_USER", "")
        self.DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
        self.DB_HOST: str = os.getenv("DB_HOST", "localhost")
        self.DB_PORT: str = os.getenv("DB_PORT", "3306")
        self.DB_NAME: str = os.getenv("DB_NAME", "quizhub")

        # Session Configuration
        self.SESSION_COOKIE_SECURE: bool = _env_bool("SESSION_COOKIE_SECURE", False)
        self.SESSION_COOKIE_HTTPONLY: bool = _env_bool("SESSION_COOKIE_HTTPONLY", True)
        self.SESSION_COOKIE_SAMESITE: str = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")

        # SQLAlchemy Configuration
        self.SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
        self.SQLALCHEMY_ECHO: bool = _env_bool("SQLALCHEMY_ECHO", False)

        # Password hashing / validation
        self.MIN_PASSWORD_LENGTH: int = _env_int("MIN_PASSWORD_LENGTH", 8)
        self.PASSWORD_REQUIRE_COMPLEXITY: bool = _env_bool("PASSWORD_REQUIRE_COMPLEXITY", True)
        self.BCRYPT_ROUNDS: int = _env_int("BCRYPT_ROUNDS", 12)

        # Quiz settings
        self.DEFAULT_QUESTION_COUNT: int = _env_int("DEFAULT_QUESTION_COUNT", 10)
        self.MAX_QUESTION_COUNT: int = _env_int("MAX_QUESTION_COUNT", 50)
        self.RECENT_ATTEMPTS_LIMIT: int = _env_int("RECENT_ATTEMPTS_LIMIT", 10)
        self.QUESTIONS_PAGE_SIZE: int = _env_int("QUESTIONS_PAGE_SIZE", 10)

        # Rate limiting (login and username lookup)
        self.RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", True)
        self.LOGIN_RATE_LIMIT: int = _env_int("LOGIN_RATE_LIMIT", 5)
        self.LOGIN_RATE_WINDOW_SECONDS: int = _env_int("LOGIN_RATE_WINDOW_SECONDS", 60)

        # Object storage
        self.UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Database URI: DATABASE_URL wins, otherwise a MySQL URI is composed."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def is_sqlite(self) -> bool:
        return self.SQLALCHEMY_DATABASE_URI.startswith("sqlite")

    def validate(self) -> None:
        """
        Validate required configuration values.
        Only enforces SECRET_KEY in production environment.
        """
        if not self.SECRET_KEY and self.FLASK_ENV == "production":
            raise ValueError(
                "SECRET_KEY environment variable is required in production. "
                "Set it in your .env file or environment variables."
            )
        if self.DEFAULT_QUESTION_COUNT < 1 or self.DEFAULT_QUESTION_COUNT > self.MAX_QUESTION_COUNT:
            raise ValueError("DEFAULT_QUESTION_COUNT must be between 1 and MAX_QUESTION_COUNT")


# Global config instance - reloaded by create_app() after load_dotenv()
config = Config()
