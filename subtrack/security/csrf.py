"""
CSRF (Cross-Site Request Forgery) token module.

This module provides CSRF token generation and validation. Storing the
token in the session and reading it from requests is left to the web
layer.
"""

import hmac
import secrets

from .security_logger import SecurityLogger


class CSRFProtection:
    """
    CSRF protection using token-based validation.

    Generates and validates CSRF tokens to prevent cross-site request forgery.
    """

    TOKEN_BYTES = 32

    @staticmethod
    def generate_token() -> str:
        """
        Generate a new CSRF token.

        Returns:
            A secure random, URL-safe token string
        """
        return secrets.token_urlsafe(CSRFProtection.TOKEN_BYTES)

    @staticmethod
    def validate_token(token: str, session_token: str) -> bool:
        """
        Validate a CSRF token against the session token.

        Args:
            token: Token from request
            session_token: Token stored in session

        Returns:
            True if both tokens are non-empty and equal, False otherwise
        """
        if not isinstance(token, str) or not isinstance(session_token, str):
            SecurityLogger.log_csrf_violation("token is not a string")
            return False

        if not token or not session_token:
            SecurityLogger.log_csrf_violation("token missing")
            return False

        # Use constant-time comparison to prevent timing attacks
        if not hmac.compare_digest(token.encode('utf-8'), session_token.encode('utf-8')):
            SecurityLogger.log_csrf_violation("token mismatch")
            return False
        return True


def generate_csrf_token() -> str:
    """Generate a new CSRF token."""
    return CSRFProtection.generate_token()


def validate_csrf_token(token: str, session_token: str) -> bool:
    """Return True iff ``token`` matches a non-empty ``session_token``."""
    return CSRFProtection.validate_token(token, session_token)
