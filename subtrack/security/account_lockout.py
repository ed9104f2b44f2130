"""
Account lockout module.

This module locks accounts after repeated failed login attempts to
prevent brute force attacks. Counters live on the account row and every
change is a single conditional UPDATE, so concurrent failed logins for
the same account are never lost.
"""

from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import and_, case, or_, update

from subtrack import db
from subtrack.auth.models import Account, utcnow
from subtrack.auth.utils import verify_password
from .security_logger import SecurityLogger


class AccountLockout:
    """
    Account lockout manager.

    States per account: ACTIVE (fewer than ``max_attempts`` failures and no
    live lock) and LOCKED (``lock_until`` in the future). A lock ends when it
    expires or when ``reset`` / ``record_successful_attempt`` clears it.
    """

    def __init__(self, max_attempts: int = 5, lockout_duration_minutes: int = 120):
        """
        Initialize account lockout.

        Args:
            max_attempts: Maximum failed attempts before lockout
            lockout_duration_minutes: Duration of lockout in minutes
        """
        self.max_attempts = max_attempts
        self.lockout_duration = timedelta(minutes=lockout_duration_minutes)

    def _execute(self, statement):
        result = db.session.execute(
            statement.execution_options(synchronize_session=False)
        )
        db.session.commit()
        return result

    def record_failed_attempt(self, account: Account):
        """
        Record a failed login attempt.

        An expired lock is cleared and counting restarts at 1. Otherwise the
        counter is incremented in the database and, when it reaches
        ``max_attempts`` with no live lock, ``lock_until`` is set in the same
        statement.

        Args:
            account: Persistent account record
        """
        now = utcnow()

        expired = self._execute(
            update(Account)
            .where(
                Account.id == account.id,
                Account.lock_until.is_not(None),
                Account.lock_until < now,
            )
            .values(login_attempts=1, lock_until=None)
        )
        if expired.rowcount:
            SecurityLogger.log_account_unlocked(account.email, "lock expired")
            SecurityLogger.log_failed_login(account.email, 1, self.max_attempts)
            return

        reaches_limit = Account.login_attempts + 1 >= self.max_attempts
        not_locked = or_(Account.lock_until.is_(None), Account.lock_until <= now)
        # lock_until is assigned first so it sees the pre-increment counter on
        # backends that evaluate SET clauses left to right
        self._execute(
            update(Account)
            .where(Account.id == account.id)
            .ordered_values(
                (
                    Account.lock_until,
                    case(
                        (and_(reaches_limit, not_locked), now + self.lockout_duration),
                        else_=Account.lock_until,
                    ),
                ),
                (Account.login_attempts, Account.login_attempts + 1),
            )
        )

        current_attempts = account.login_attempts
        current_app.logger.warning(
            f"🔒 Failed login attempt {current_attempts}/{self.max_attempts} for: {account.email}"
        )
        SecurityLogger.log_failed_login(account.email, current_attempts, self.max_attempts)

        if current_attempts >= self.max_attempts and account.is_locked:
            current_app.logger.error(
                f"🚫 ACCOUNT LOCKED: {account.email} after {current_attempts} failed attempts. "
                f"Locked until: {account.lock_until}"
            )
            SecurityLogger.log_account_locked(account.email, account.lock_until)

    def record_successful_attempt(self, account: Account):
        """
        Record a successful login attempt and reset counter.

        Args:
            account: Persistent account record
        """
        self._execute(
            update(Account)
            .where(Account.id == account.id)
            .values(login_attempts=0, lock_until=None, last_login_at=utcnow())
        )
        SecurityLogger.log_successful_login(account.id, account.email)

    def reset(self, account: Account):
        """
        Clear failed attempts and any lock without recording a login.

        Args:
            account: Persistent account record
        """
        self._execute(
            update(Account)
            .where(Account.id == account.id)
            .values(login_attempts=0, lock_until=None)
        )
        current_app.logger.info(f"🔓 Account lockout reset for: {account.email}")
        SecurityLogger.log_account_unlocked(account.email, "explicit reset")

    def is_locked(self, account: Account) -> bool:
        """
        Check if account is currently locked.

        Args:
            account: Account record

        Returns:
            True while ``lock_until`` is in the future
        """
        return account.is_locked

    def locked_until(self, account: Account) -> datetime | None:
        """Return the lock expiry if the account is locked, else None."""
        return account.lock_until if account.is_locked else None

    def get_remaining_attempts(self, account: Account) -> int:
        """
        Get remaining login attempts before lockout.

        Args:
            account: Account record

        Returns:
            Number of remaining attempts
        """
        if account.lock_until is not None and not account.is_locked:
            # Expired lock: the next failure starts counting again at 1
            return self.max_attempts
        return max(0, self.max_attempts - (account.login_attempts or 0))

    def compare_password(self, account: Account, candidate: str) -> bool:
        """
        Compare a plaintext candidate with the account's stored hash.

        Raises:
            HashComparisonError: If the stored hash is missing or malformed
        """
        return verify_password(candidate, account.password_hash)


def get_account_lockout() -> AccountLockout:
    """Get the account lockout instance configured on the current app."""
    return current_app.extensions["subtrack.security"]["account_lockout"]
