"""
Security module for the application.

This module provides the security utilities of the account core:
- Input sanitization
- Field validation (email, password strength, URL, name)
- CSRF and secure random tokens
- Rate limiting
- Security headers
- Security logging

Account lockout lives in ``subtrack.security.account_lockout`` and app
wiring in ``subtrack.security.security_init``; both depend on the account
model and are imported from there directly.
"""

from .errors import HashComparisonError, InvalidUrlError, SecurityError, ValidationError
from .sanitizer import escape_html, sanitize_deep, sanitize_email, sanitize_text, sanitize_url
from .input_validator import (
    ChoiceRule,
    EmailRule,
    FieldRule,
    NameRule,
    PasswordRule,
    UrlRule,
    ValidationResult,
    email_rule,
    name_rule,
    password_rule,
    url_rule,
    validate_input,
)
from .password_validator import PasswordValidator
from .csrf import CSRFProtection, generate_csrf_token, validate_csrf_token
from .tokens import generate_secure_token
from .rate_limiter import RateLimiter
from .security_headers import SecurityHeaders
from .security_logger import SecurityLogger

__all__ = [
    'SecurityError',
    'ValidationError',
    'InvalidUrlError',
    'HashComparisonError',
    'sanitize_text',
    'sanitize_email',
    'sanitize_url',
    'sanitize_deep',
    'escape_html',
    'FieldRule',
    'EmailRule',
    'PasswordRule',
    'UrlRule',
    'NameRule',
    'ChoiceRule',
    'ValidationResult',
    'email_rule',
    'password_rule',
    'url_rule',
    'name_rule',
    'validate_input',
    'PasswordValidator',
    'CSRFProtection',
    'generate_csrf_token',
    'validate_csrf_token',
    'generate_secure_token',
    'RateLimiter',
    'SecurityHeaders',
    'SecurityLogger',
]
