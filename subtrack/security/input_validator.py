"""
Input validation module.

This module provides declarative field rules (email, password, URL,
display name, role) and a wrapper that validates plain data against a
rule or a mapping of rules without ever raising.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import InvalidUrlError, ValidationError
from .password_validator import PasswordValidator
from .sanitizer import sanitize_email, sanitize_text, sanitize_url

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of validating one value or one object."""

    success: bool
    data: Any = None
    errors: list[str] = field(default_factory=list)
    details: list[dict] = field(default_factory=list)


class FieldRule:
    """
    Base class for a single-field validation rule.

    Subclasses implement ``parse`` which returns the normalized value or
    raises ``ValidationError``.
    """

    def __init__(self, field_name: str = 'value'):
        self.field = field_name

    def parse(self, raw: Any) -> Any:
        raise NotImplementedError

    def validate(self, raw: Any) -> ValidationResult:
        """Validate ``raw`` and return a result instead of raising."""
        return validate_input(self, raw)

    def _error(self, message: str) -> ValidationError:
        return ValidationError.single(self.field, message)

    def _require_string(self, raw: Any, label: str) -> str:
        if raw is None:
            raise self._error(f"{label} is required")
        if not isinstance(raw, str):
            raise self._error(f"{label} must be a string")
        return raw


class EmailRule(FieldRule):
    """Email address shaped like local@domain.tld, stored lower-case."""

    EMAIL_PATTERN = re.compile(
        r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$'
    )
    MAX_LENGTH = 254

    def __init__(self, field_name: str = 'email'):
        super().__init__(field_name)

    def parse(self, raw: Any) -> str:
        email = sanitize_email(self._require_string(raw, 'Email'))
        if not email:
            raise self._error("Email is required")
        if len(email) > self.MAX_LENGTH:
            raise self._error("Email is too long")
        if not self.EMAIL_PATTERN.match(email):
            raise self._error("Invalid email address")
        return email


class PasswordRule(FieldRule):
    """Password strength rule backed by ``PasswordValidator``."""

    def __init__(self, field_name: str = 'password',
                 validator: Optional[PasswordValidator] = None):
        super().__init__(field_name)
        self.validator = validator or PasswordValidator()

    def parse(self, raw: Any) -> str:
        password = self._require_string(raw, 'Password')
        is_valid, errors = self.validator.validate(password)
        if not is_valid:
            raise ValidationError(
                [{'field': self.field, 'message': message} for message in errors]
            )
        return password


class UrlRule(FieldRule):
    """Absolute http/https URL, normalized by ``sanitize_url``."""

    def __init__(self, field_name: str = 'url'):
        super().__init__(field_name)

    def parse(self, raw: Any) -> str:
        url = self._require_string(raw, 'URL')
        if not url.strip():
            raise self._error("URL is required")
        try:
            return sanitize_url(url)
        except InvalidUrlError:
            raise self._error("Invalid URL")


class NameRule(FieldRule):
    """Display name of 2-50 characters with markup stripped."""

    MIN_LENGTH = 2
    MAX_LENGTH = 50

    def __init__(self, field_name: str = 'name'):
        super().__init__(field_name)

    def parse(self, raw: Any) -> str:
        name = self._require_string(raw, 'Name').strip()
        if len(name) < self.MIN_LENGTH:
            raise self._error(f"Name must be at least {self.MIN_LENGTH} characters")
        if len(name) > self.MAX_LENGTH:
            raise self._error("Name is too long")
        cleaned = sanitize_text(name)
        if len(cleaned) < self.MIN_LENGTH:
            raise self._error(f"Name must be at least {self.MIN_LENGTH} characters")
        return cleaned


class ChoiceRule(FieldRule):
    """Value restricted to a fixed set of strings, with an optional default."""

    def __init__(self, field_name: str, choices: tuple[str, ...],
                 default: Optional[str] = None):
        super().__init__(field_name)
        self.choices = choices
        self.default = default

    def parse(self, raw: Any) -> str:
        if raw is None and self.default is not None:
            return self.default
        value = self._require_string(raw, self.field.capitalize())
        if value not in self.choices:
            raise self._error(
                f"{self.field.capitalize()} must be one of: {', '.join(self.choices)}"
            )
        return value


email_rule = EmailRule()
password_rule = PasswordRule()
url_rule = UrlRule()
name_rule = NameRule()


def validate_input(schema: FieldRule | Mapping, data: Any) -> ValidationResult:
    """
    Validate data against a rule or an object schema.

    Args:
        schema: A ``FieldRule``, or a mapping of field name to ``FieldRule``
                Example: {
                    'name': name_rule,
                    'email': email_rule,
                }
        data: Raw value (single rule) or mapping of raw values (object schema)

    Returns:
        ValidationResult with the normalized data on success, or the error
        messages and ``{'field', 'message'}`` details on failure. Never raises.
    """
    try:
        if isinstance(schema, Mapping):
            return _validate_object(schema, data)
        return ValidationResult(success=True, data=schema.parse(data))
    except ValidationError as exc:
        return ValidationResult(success=False, errors=exc.messages, details=exc.errors)
    except Exception:
        logger.exception("Unexpected error during input validation")
        return ValidationResult(
            success=False,
            errors=['Validation failed'],
            details=[{'field': None, 'message': 'Validation failed'}],
        )


def _validate_object(schema: Mapping, data: Any) -> ValidationResult:
    if not isinstance(data, Mapping):
        raise ValidationError.single(None, "Expected an object")

    cleaned = {}
    details = []
    for field_name, rule in schema.items():
        try:
            cleaned[field_name] = rule.parse(data.get(field_name))
        except ValidationError as exc:
            details.extend(
                {'field': field_name, 'message': error['message']} for error in exc.errors
            )

    if details:
        raise ValidationError(details)
    return ValidationResult(success=True, data=cleaned)
