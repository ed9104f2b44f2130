from flask import current_app, has_app_context
from passlib.hash import bcrypt

from subtrack.auth.models import Account
import subtrack.config as config_module
from subtrack.security.errors import HashComparisonError, ValidationError
from subtrack.security.input_validator import email_rule, name_rule, password_rule


def _truncate_password(plain_password: str) -> str:
    """Helper to consistently truncate password to its first 72 UTF-8 bytes."""
    # Encode to bytes, take the first 72 bytes, and decode back to a string,
    # ignoring any incomplete multi-byte characters at the truncation point.
    password_bytes = plain_password.encode('utf-8')[:72]
    return password_bytes.decode('utf-8', errors='ignore')


def _bcrypt_rounds() -> int:
    if has_app_context():
        return current_app.config.get("BCRYPT_ROUNDS", config_module.config.BCRYPT_ROUNDS)
    return config_module.config.BCRYPT_ROUNDS


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """
    Hash password using bcrypt. It is truncated to the first 72 bytes
    of its UTF-8 encoding before hashing. ``rounds`` is the cost factor
    and defaults to the BCRYPT_ROUNDS setting.
    """
    truncated = _truncate_password(plain_password)
    return bcrypt.using(rounds=rounds or _bcrypt_rounds()).hash(truncated)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """
    Verify a password against a hash, using the same truncation as hash_password.

    Raises HashComparisonError when the stored hash is missing or malformed,
    so a corrupt record never reads as a plain mismatch.
    """
    if not isinstance(plain_password, str):
        return False
    truncated = _truncate_password(plain_password)
    try:
        return bcrypt.verify(truncated, password_hash)
    except (TypeError, ValueError) as exc:
        raise HashComparisonError("Password comparison failed: stored hash is malformed") from exc


def prepare_for_persistence(account: Account) -> Account:
    """
    Validate an account and hash a pending plaintext password before it is written.

    ``name`` and ``email`` are run through their field rules and replaced by
    the normalized values. A pending plaintext is checked against the
    password rule, hashed, and then dropped from the object. An account
    with neither a pending password nor a stored hash is rejected.

    Raises:
        ValidationError: With every failing field; the account is left as it was
    """
    errors = []
    cleaned = {}
    for field_name, rule in (("name", name_rule), ("email", email_rule)):
        try:
            cleaned[field_name] = rule.parse(getattr(account, field_name))
        except ValidationError as exc:
            errors.extend(exc.errors)

    plaintext = account.take_pending_password()
    if plaintext is None:
        if not account.password_hash:
            errors.append({"field": "password", "message": "Password is required"})
    else:
        try:
            password_rule.parse(plaintext)
        except ValidationError as exc:
            errors.extend(exc.errors)

    if errors:
        if plaintext is not None:
            account.password = plaintext
        raise ValidationError(errors)

    for field_name, value in cleaned.items():
        if getattr(account, field_name) != value:
            setattr(account, field_name, value)
    if plaintext is not None:
        account.password_hash = hash_password(plaintext)
    return account
