"""
Secure random token generation.

Tokens are drawn from the operating system's cryptographic random source.
When the platform has none, a pseudo-random fallback is used and a security
warning is logged: fallback tokens are lower-assurance and must not be used
as production secrets.
"""

import random
import secrets
import string

from .security_logger import SecurityLogger

TOKEN_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

_system_random = secrets.SystemRandom()


def _fallback_token(length: int) -> str:
    # Lower-assurance path: Mersenne Twister, predictable given enough output
    rng = random.Random()
    return ''.join(rng.choice(TOKEN_ALPHABET) for _ in range(length))


def generate_secure_token(length: int = 32) -> str:
    """
    Generate an alphanumeric token.

    Args:
        length: Number of characters in the token

    Returns:
        A string of exactly ``length`` characters from [A-Za-z0-9]

    Raises:
        ValueError: If length is negative
    """
    if length < 0:
        raise ValueError("Token length must not be negative")

    try:
        return ''.join(_system_random.choice(TOKEN_ALPHABET) for _ in range(length))
    except NotImplementedError:
        SecurityLogger.log_weak_token_source("secure token")
        return _fallback_token(length)
