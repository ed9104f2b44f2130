"""
Configuration module for the application.
All configuration values are read from environment variables.
Security limits fall back to the defaults below when unset.
"""
import os
import secrets
import warnings


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name, "")
    return int(value) if value else default


def _bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name, "")
    return value.lower() == "true" if value else default


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        # Flask Configuration
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "")
        self.FLASK_ENV: str = os.getenv("FLASK_ENV", "")
        self.FLASK_DEBUG: bool = _bool_env("FLASK_DEBUG")

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
        self.DB_HOST: str = os.getenv("DB_HOST", "")
        self.DB_PORT: str = os.getenv("DB_PORT", "3306")
        self.DB_NAME: str = os.getenv("DB_NAME", "")

        # SQLAlchemy Configuration
        self.SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
        self.SQLALCHEMY_ECHO: bool = _bool_env("SQLALCHEMY_ECHO")

        # Logging
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Credential hashing (bcrypt cost factor)
        self.BCRYPT_ROUNDS: int = _int_env("BCRYPT_ROUNDS", 12)

        # Account lockout
        self.MAX_LOGIN_ATTEMPTS: int = _int_env("MAX_LOGIN_ATTEMPTS", 5)
        self.LOCKOUT_DURATION_MINUTES: int = _int_env("LOCKOUT_DURATION_MINUTES", 120)

        # Rate limiting (auth endpoints and general API traffic)
        self.AUTH_RATE_LIMIT_MAX_REQUESTS: int = _int_env("AUTH_RATE_LIMIT_MAX_REQUESTS", 5)
        self.AUTH_RATE_LIMIT_WINDOW_SECONDS: int = _int_env("AUTH_RATE_LIMIT_WINDOW_SECONDS", 15 * 60)
        self.API_RATE_LIMIT_MAX_REQUESTS: int = _int_env("API_RATE_LIMIT_MAX_REQUESTS", 100)
        self.API_RATE_LIMIT_WINDOW_SECONDS: int = _int_env("API_RATE_LIMIT_WINDOW_SECONDS", 60)

        # Session Configuration (read by the web layer)
        self.SESSION_COOKIE_SECURE: bool = _bool_env("SESSION_COOKIE_SECURE")

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct database URI from environment variables."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_HOST:
            return (
                f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
            )
        return "sqlite:///subtrack.db"

    def as_flask_config(self) -> dict:
        """Return the settings that are copied into ``app.config``."""
        return {
            "SECRET_KEY": self.SECRET_KEY,
            "SQLALCHEMY_DATABASE_URI": self.SQLALCHEMY_DATABASE_URI,
            "SQLALCHEMY_TRACK_MODIFICATIONS": self.SQLALCHEMY_TRACK_MODIFICATIONS,
            "SQLALCHEMY_ECHO": self.SQLALCHEMY_ECHO,
            "SESSION_COOKIE_SECURE": self.SESSION_COOKIE_SECURE,
            "LOG_LEVEL": self.LOG_LEVEL,
            "BCRYPT_ROUNDS": self.BCRYPT_ROUNDS,
            "MAX_LOGIN_ATTEMPTS": self.MAX_LOGIN_ATTEMPTS,
            "LOCKOUT_DURATION_MINUTES": self.LOCKOUT_DURATION_MINUTES,
            "AUTH_RATE_LIMIT_MAX_REQUESTS": self.AUTH_RATE_LIMIT_MAX_REQUESTS,
            "AUTH_RATE_LIMIT_WINDOW_SECONDS": self.AUTH_RATE_LIMIT_WINDOW_SECONDS,
            "API_RATE_LIMIT_MAX_REQUESTS": self.API_RATE_LIMIT_MAX_REQUESTS,
            "API_RATE_LIMIT_WINDOW_SECONDS": self.API_RATE_LIMIT_WINDOW_SECONDS,
        }

    def validate(self) -> None:
        """
        Validate required configuration values.
        Only enforces SECRET_KEY in production environment.
        """
        if not self.SECRET_KEY:
            if self.FLASK_ENV == "production":
                raise ValueError(
                    "SECRET_KEY environment variable is required in production. "
                    "Set it in your .env file or environment variables."
                )
            # For non-production, a warning was already issued in __init__
        if self.BCRYPT_ROUNDS < 4 or self.BCRYPT_ROUNDS > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        if self.MAX_LOGIN_ATTEMPTS < 1:
            raise ValueError("MAX_LOGIN_ATTEMPTS must be at least 1")
        if self.LOCKOUT_DURATION_MINUTES < 1:
            raise ValueError("LOCKOUT_DURATION_MINUTES must be at least 1")
        for prefix in ("AUTH", "API"):
            if getattr(self, f"{prefix}_RATE_LIMIT_MAX_REQUESTS") < 1:
                raise ValueError(f"{prefix}_RATE_LIMIT_MAX_REQUESTS must be at least 1")
            if getattr(self, f"{prefix}_RATE_LIMIT_WINDOW_SECONDS") < 1:
                raise ValueError(f"{prefix}_RATE_LIMIT_WINDOW_SECONDS must be at least 1")


# Global config instance - will be re-initialized after load_dotenv()
config = Config()


def reload_config() -> Config:
    """Re-read the environment into the module-level ``config`` and return it."""
    global config
    config = Config()
    return config
