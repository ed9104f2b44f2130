"""
Test cases for account lockout.
"""
from datetime import timedelta

import pytest
from sqlalchemy import update

from subtrack import db
from subtrack.auth.models import Account, utcnow
from subtrack.security.account_lockout import AccountLockout, get_account_lockout
from subtrack.security.errors import HashComparisonError

from conftest import TEST_PASSWORD


def _set_counters(account, **values):
    """Write counters straight to the row, bypassing the session's copy."""
    db.session.execute(
        update(Account).where(Account.id == account.id).values(**values)
        .execution_options(synchronize_session=False)
    )
    db.session.commit()


class TestAccountLockout:
    """Test cases for failed-attempt counting and locking."""

    def test_configured_instance(self, app):
        """Test the app carries a lockout built from its configuration."""
        lockout = get_account_lockout()
        assert lockout.max_attempts == 5
        assert lockout.lockout_duration == timedelta(minutes=120)

    def test_failed_attempts_counted(self, account):
        """Test each failure increments the stored counter."""
        lockout = get_account_lockout()
        lockout.record_failed_attempt(account)
        lockout.record_failed_attempt(account)
        assert account.login_attempts == 2
        assert not lockout.is_locked(account)
        assert lockout.get_remaining_attempts(account) == 3

    def test_locks_after_max_attempts(self, account):
        """Test the fifth failure locks the account for the lockout duration."""
        lockout = get_account_lockout()
        before = utcnow()
        for _ in range(5):
            lockout.record_failed_attempt(account)

        assert account.login_attempts == 5
        assert lockout.is_locked(account)
        assert lockout.get_remaining_attempts(account) == 0
        assert account.lock_until >= before + timedelta(minutes=120)
        assert account.lock_until <= utcnow() + timedelta(minutes=120)
        assert lockout.locked_until(account) == account.lock_until

    def test_failures_while_locked_keep_lock(self, account):
        """Test further failures do not extend a live lock."""
        lockout = get_account_lockout()
        for _ in range(5):
            lockout.record_failed_attempt(account)
        lock_until = account.lock_until

        lockout.record_failed_attempt(account)
        assert account.login_attempts == 6
        assert account.lock_until == lock_until

    def test_expired_lock_restarts_count(self, account):
        """Test a failure after the lock expired counts as the first one."""
        lockout = get_account_lockout()
        _set_counters(account, login_attempts=5,
                      lock_until=utcnow() - timedelta(minutes=1))
        assert lockout.get_remaining_attempts(account) == 5

        lockout.record_failed_attempt(account)
        assert account.login_attempts == 1
        assert account.lock_until is None
        assert not lockout.is_locked(account)

    def test_successful_attempt_resets(self, account):
        """Test a successful login clears counters and stamps last_login_at."""
        lockout = get_account_lockout()
        for _ in range(3):
            lockout.record_failed_attempt(account)

        lockout.record_successful_attempt(account)
        assert account.login_attempts == 0
        assert account.lock_until is None
        assert account.last_login_at is not None

    def test_reset_unlocks(self, account):
        """Test an explicit reset clears a live lock."""
        lockout = get_account_lockout()
        for _ in range(5):
            lockout.record_failed_attempt(account)
        assert lockout.is_locked(account)

        lockout.reset(account)
        assert not lockout.is_locked(account)
        assert account.login_attempts == 0
        assert account.last_login_at is None

    def test_increment_uses_stored_value(self, account):
        """Test a stale in-memory counter cannot overwrite concurrent failures."""
        lockout = get_account_lockout()
        assert account.login_attempts == 0

        # Another worker recorded three failures; this session's copy is stale
        db.session.execute(
            update(Account).where(Account.id == account.id)
            .values(login_attempts=3)
            .execution_options(synchronize_session=False)
        )
        assert account.login_attempts == 0

        lockout.record_failed_attempt(account)
        assert account.login_attempts == 4

        lockout.record_failed_attempt(account)
        assert account.login_attempts == 5
        assert lockout.is_locked(account)

    def test_custom_limits(self, account):
        """Test the limits are taken from the instance."""
        lockout = AccountLockout(max_attempts=2, lockout_duration_minutes=1)
        lockout.record_failed_attempt(account)
        assert not lockout.is_locked(account)
        lockout.record_failed_attempt(account)
        assert lockout.is_locked(account)
        assert account.lock_until <= utcnow() + timedelta(minutes=1)

    def test_lock_logged(self, account, caplog):
        """Test the lock is reported on the security logger."""
        lockout = get_account_lockout()
        with caplog.at_level('INFO', logger='subtrack.security'):
            for _ in range(5):
                lockout.record_failed_attempt(account)
        assert 'SECURITY: Account locked' in caplog.text
        assert TEST_PASSWORD not in caplog.text


class TestComparePassword:
    """Test cases for credential comparison."""

    def test_correct_and_wrong_password(self, account):
        """Test the stored hash is compared against the candidate."""
        lockout = get_account_lockout()
        assert lockout.compare_password(account, TEST_PASSWORD)
        assert not lockout.compare_password(account, 'Wrong12345')

    def test_malformed_hash(self, account):
        """Test a corrupt stored hash raises HashComparisonError."""
        account.password_hash = 'corrupted'
        with pytest.raises(HashComparisonError):
            get_account_lockout().compare_password(account, TEST_PASSWORD)
