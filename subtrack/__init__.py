from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from dotenv import load_dotenv
from flask_migrate import Migrate
import os

# Load environment variables early so config is available at import time
load_dotenv()

db = SQLAlchemy()
migrate = Migrate()


def create_app(overrides: dict | None = None) -> Flask:
    """
    Application factory.
    Loads environment variables, configures the database and logging,
    and attaches the security components.

    ``overrides`` is applied on top of the environment configuration.
    """
    # Re-initialize config to ensure latest .env values are loaded
    from subtrack.config import reload_config
    config = reload_config()

    # Validate configuration
    config.validate()

    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

    app = Flask(__name__)

    # Load configuration from config module
    app.config.update(config.as_flask_config())
    if overrides:
        app.config.update(overrides)

    # Database connection pooling for MySQL
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("mysql"):
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {
            "pool_size": 10,
            "pool_recycle": 3600,
            "pool_pre_ping": True,
            "max_overflow": 20,
            "connect_args": {
                "connect_timeout": 5,
                "read_timeout": 10,
                "write_timeout": 10,
                "charset": "utf8mb4",
            }
        })

    # Security events log on the "subtrack.security" child logger
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.join(project_root, "migrations"))

    # Initialize security features
    from subtrack.security.security_init import init_security
    init_security(app)

    from subtrack.commands import register_commands
    register_commands(app)

    with app.app_context():
        from subtrack.auth import models  # noqa: F401
        db.create_all()

    return app
