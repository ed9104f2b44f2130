"""
Account service.

Registration, credential login and password changes expressed over plain
data. The web layer maps the results onto HTTP responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from subtrack import db
from subtrack.auth.models import DEFAULT_ROLE, ROLES, Account
from subtrack.auth.utils import prepare_for_persistence
from subtrack.security.account_lockout import get_account_lockout
from subtrack.security.errors import ValidationError
from subtrack.security.input_validator import (
    ChoiceRule,
    ValidationResult,
    email_rule,
    name_rule,
    password_rule,
    validate_input,
)
from subtrack.security.security_init import get_rate_limiter

REGISTRATION_SCHEMA = {
    "name": name_rule,
    "email": email_rule,
    "password": password_rule,
}

role_rule = ChoiceRule("role", ROLES, default=DEFAULT_ROLE)

DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists"
RATE_LIMITED_MESSAGE = "Too many attempts. Please try again later."

AUTH_OK = "ok"
AUTH_INVALID = "invalid"
AUTH_LOCKED = "locked"
AUTH_RATE_LIMITED = "rate_limited"


@dataclass
class AuthResult:
    status: str
    account: Optional[Account] = None
    locked_until: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.status == AUTH_OK


def _failure(error: ValidationError) -> ValidationResult:
    return ValidationResult(success=False, errors=error.messages, details=error.errors)


def _throttled(client_id: Optional[str]) -> bool:
    """True when ``client_id`` is given and the auth limiter refuses it."""
    return client_id is not None and not get_rate_limiter("auth").is_allowed(client_id)


def register_account(data: dict, role: Optional[str] = None,
                     client_id: Optional[str] = None) -> ValidationResult:
    """
    Validate registration data and create the account.

    ``role`` is set by trusted callers only; registration data never
    chooses its own role. ``client_id`` (usually the client IP) is counted
    against the ``auth`` rate limiter before anything else happens.
    Returns a ValidationResult whose ``data`` is the new Account on success.
    """
    if _throttled(client_id):
        return _failure(ValidationError.single(None, RATE_LIMITED_MESSAGE))

    result = validate_input(REGISTRATION_SCHEMA, data)
    if not result.success:
        return result

    role_result = role_rule.validate(role)
    if not role_result.success:
        return role_result

    cleaned = result.data
    if Account.find_by_email(cleaned["email"]) is not None:
        return _failure(ValidationError.single("email", DUPLICATE_EMAIL_MESSAGE))

    account = Account(
        name=cleaned["name"],
        email=cleaned["email"],
        role=role_result.data,
        password=cleaned["password"],
    )
    prepare_for_persistence(account)

    db.session.add(account)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        db.session.rollback()
        return _failure(ValidationError.single("email", DUPLICATE_EMAIL_MESSAGE))

    current_app.logger.info(f"Account registered successfully: {account.email}")
    return ValidationResult(success=True, data=account)


def authenticate(email: str, password: str,
                 client_id: Optional[str] = None) -> AuthResult:
    """
    Check credentials and update the lockout counters.

    Unknown emails and wrong passwords both come back as ``invalid``; the
    account is only returned on success. A ``client_id`` refused by the
    ``auth`` rate limiter comes back as ``rate_limited`` without touching
    the account. Raises HashComparisonError when the stored hash is corrupt.
    """
    if _throttled(client_id):
        return AuthResult(AUTH_RATE_LIMITED)

    lockout = get_account_lockout()

    account = Account.find_by_email(email) if isinstance(email, str) else None
    if account is None:
        current_app.logger.info("Login attempt for unknown email")
        return AuthResult(AUTH_INVALID)

    if lockout.is_locked(account):
        current_app.logger.warning(f"Login attempt for locked account: {account.email}")
        return AuthResult(AUTH_LOCKED, locked_until=account.lock_until)

    if not lockout.compare_password(account, password):
        lockout.record_failed_attempt(account)
        if lockout.is_locked(account):
            return AuthResult(AUTH_LOCKED, locked_until=account.lock_until)
        return AuthResult(AUTH_INVALID)

    lockout.record_successful_attempt(account)
    return AuthResult(AUTH_OK, account=account)


def change_password(account: Account, new_password: str) -> ValidationResult:
    """Validate and store a new password; the hash is recomputed before commit."""
    result = password_rule.validate(new_password)
    if not result.success:
        return result

    account.password = result.data
    prepare_for_persistence(account)
    db.session.commit()
    current_app.logger.info(f"Password changed for: {account.email}")
    return ValidationResult(success=True, data=account)
