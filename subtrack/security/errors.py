"""
Exceptions raised by the security core.

Rate limiting and account lockout never raise; they report through
return values. Sanitization never raises except for URLs.
"""


class SecurityError(Exception):
    """Base class for security core errors."""


class ValidationError(SecurityError):
    """
    Field-level validation failure.

    Carries a list of ``{'field': ..., 'message': ...}`` dictionaries.
    """

    def __init__(self, errors: list[dict]):
        self.errors = list(errors)
        super().__init__("; ".join(self.messages) or "Validation failed")

    @property
    def messages(self) -> list[str]:
        return [error["message"] for error in self.errors]

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])


class InvalidUrlError(SecurityError, ValueError):
    """URL is malformed or uses a scheme other than http/https."""


class HashComparisonError(SecurityError):
    """The stored credential hash is missing or malformed."""
