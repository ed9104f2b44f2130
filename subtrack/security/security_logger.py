"""
Security logging module.

This module provides specialized logging for security events
such as failed logins, account lockouts, and rejected input.

Events are written to the ``subtrack.security`` logger, which is a child
of the Flask application logger and shares its handlers and level.
"""

import logging
from datetime import datetime, timezone

logger = logging.getLogger("subtrack.security")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SecurityLogger:
    """
    Security event logger.

    Logs security-related events for monitoring and auditing.
    Plaintext credentials are never passed to these methods.
    """

    @staticmethod
    def log_failed_login(email: str, attempts: int, max_attempts: int):
        """
        Log a failed login attempt.

        Args:
            email: Email address of the account
            attempts: Failed attempts recorded so far
            max_attempts: Attempts allowed before lockout
        """
        logger.warning(
            f"SECURITY: Failed login attempt {attempts}/{max_attempts} - "
            f"Email: {email}, Time: {_now()}"
        )

    @staticmethod
    def log_successful_login(account_id: str, email: str):
        """
        Log a successful login.

        Args:
            account_id: Account ID
            email: Account email
        """
        logger.info(
            f"SECURITY: Successful login - Account ID: {account_id}, "
            f"Email: {email}, Time: {_now()}"
        )

    @staticmethod
    def log_account_locked(email: str, lock_until: datetime | None,
                           reason: str = "Too many failed attempts"):
        """
        Log account lockout.

        Args:
            email: Email of the locked account
            lock_until: When the lock expires
            reason: Reason for lockout
        """
        logger.error(
            f"SECURITY: Account locked - Email: {email}, Reason: {reason}, "
            f"Locked until: {lock_until}, Time: {_now()}"
        )

    @staticmethod
    def log_account_unlocked(email: str, reason: str):
        """Log a lock being cleared (expiry or explicit reset)."""
        logger.info(
            f"SECURITY: Account unlocked - Email: {email}, Reason: {reason}, "
            f"Time: {_now()}"
        )

    @staticmethod
    def log_rate_limit_exceeded(identifier: str, count: int, max_requests: int):
        """
        Log rate limit exceeded.

        Args:
            identifier: User or IP identifier
            count: Requests already counted in the window
            max_requests: Ceiling for the window
        """
        logger.warning(
            f"SECURITY: Rate limit exceeded - Identifier: {identifier}, "
            f"Count: {count}, Max: {max_requests}, Time: {_now()}"
        )

    @staticmethod
    def log_csrf_violation(reason: str):
        """Log a CSRF token that failed validation."""
        logger.warning(f"SECURITY: CSRF violation - Reason: {reason}, Time: {_now()}")

    @staticmethod
    def log_injection_attempt(input_type: str, value: str):
        """
        Log potential injection attempt.

        Args:
            input_type: Type of injection (XSS, URL, etc.)
            value: Suspicious input value (truncated)
        """
        truncated_value = value[:100] if len(value) > 100 else value
        logger.warning(
            f"SECURITY: Potential {input_type} injection - "
            f"Value: {truncated_value!r}, Time: {_now()}"
        )

    @staticmethod
    def log_weak_token_source(purpose: str):
        """Log that a token was generated without a cryptographic source."""
        logger.warning(
            f"SECURITY: No cryptographic random source available, "
            f"falling back to pseudo-random generator for {purpose}. "
            f"Do not use this token as a production secret. Time: {_now()}"
        )
