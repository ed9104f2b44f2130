"""
Security initialization module.

This module builds the security components for a Flask application from
its configuration and attaches them to ``app.extensions``.
"""

from flask import Flask, current_app

from .account_lockout import AccountLockout
from .rate_limiter import RateLimiter

EXTENSION_KEY = "subtrack.security"


def init_security(app: Flask):
    """
    Initialize all security features for the Flask app.

    Args:
        app: Flask application instance
    """
    app.extensions[EXTENSION_KEY] = {
        "account_lockout": AccountLockout(
            max_attempts=app.config["MAX_LOGIN_ATTEMPTS"],
            lockout_duration_minutes=app.config["LOCKOUT_DURATION_MINUTES"],
        ),
        "rate_limiters": {
            "auth": RateLimiter(
                max_requests=app.config["AUTH_RATE_LIMIT_MAX_REQUESTS"],
                window_seconds=app.config["AUTH_RATE_LIMIT_WINDOW_SECONDS"],
            ),
            "api": RateLimiter(
                max_requests=app.config["API_RATE_LIMIT_MAX_REQUESTS"],
                window_seconds=app.config["API_RATE_LIMIT_WINDOW_SECONDS"],
            ),
        },
    }

    # Security is now initialized
    app.logger.info("Security features initialized")


def get_rate_limiter(name: str) -> RateLimiter:
    """
    Get a named rate limiter ('auth' or 'api') of the current app.

    Raises:
        KeyError: If no limiter with that name is configured
    """
    return current_app.extensions[EXTENSION_KEY]["rate_limiters"][name]


def get_security_config(app: Flask) -> dict:
    """
    Get security configuration.

    Returns:
        Dictionary with security configuration
    """
    return {
        'rate_limiting': {
            'auth': {
                'max_requests': app.config["AUTH_RATE_LIMIT_MAX_REQUESTS"],
                'window_seconds': app.config["AUTH_RATE_LIMIT_WINDOW_SECONDS"],
            },
            'api': {
                'max_requests': app.config["API_RATE_LIMIT_MAX_REQUESTS"],
                'window_seconds': app.config["API_RATE_LIMIT_WINDOW_SECONDS"],
            },
        },
        'account_lockout': {
            'max_attempts': app.config["MAX_LOGIN_ATTEMPTS"],
            'lockout_duration_minutes': app.config["LOCKOUT_DURATION_MINUTES"],
        },
        'password_hashing': {
            'scheme': 'bcrypt',
            'rounds': app.config["BCRYPT_ROUNDS"],
        },
    }
