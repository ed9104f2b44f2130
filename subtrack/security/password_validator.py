"""
Password strength validation module.

Account passwords must be 8-128 characters long and mix lowercase,
uppercase and digits. Symbols, spaces and non-ASCII letters are allowed
but never required.
"""

import re
from typing import List, Tuple

LOWERCASE = re.compile(r'[a-z]')
UPPERCASE = re.compile(r'[A-Z]')
DIGIT = re.compile(r'[0-9]')


class PasswordValidator:
    """
    Password strength validator.

    Every unmet requirement is reported, in a stable order, so a form can
    show all of them at once.
    """

    def __init__(self, min_length: int = 8, max_length: int = 128,
                 require_uppercase: bool = True, require_lowercase: bool = True,
                 require_digit: bool = True):
        self.min_length = min_length
        self.max_length = max_length
        # (enabled, pattern, message) in reporting order
        self.character_rules = (
            (require_lowercase, LOWERCASE,
             "Password must contain at least one lowercase letter"),
            (require_uppercase, UPPERCASE,
             "Password must contain at least one uppercase letter"),
            (require_digit, DIGIT,
             "Password must contain at least one number"),
        )

    def validate(self, password: str) -> Tuple[bool, List[str]]:
        """
        Validate password strength.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        if not isinstance(password, str) or not password:
            return False, ['Password is required']

        errors = []
        if len(password) < self.min_length:
            errors.append(f"Password must be at least {self.min_length} characters")
        elif len(password) > self.max_length:
            errors.append("Password is too long")

        errors.extend(
            message
            for enabled, pattern, message in self.character_rules
            if enabled and not pattern.search(password)
        )
        return not errors, errors
