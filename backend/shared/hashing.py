"""
Secret hashing utilities using bcrypt.

Used for passwords and one-time codes. Accounts created through an
identity provider get an *unusable* password marker instead of a hash;
it can never verify and is recognisable by ``is_unusable_password``.
"""

import secrets
from functools import lru_cache
from typing import Optional

import bcrypt

from .config import get_settings

UNUSABLE_PASSWORD_PREFIX = "!"

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a secret using bcrypt.

    Args:
        password: Plain text secret
        rounds: Cost factor; defaults to ``settings.bcrypt_rounds``

    Returns:
        Bcrypt hash string
    """
    salt = bcrypt.gensalt(rounds=rounds or get_settings().bcrypt_rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a secret against a hash in constant time.

    Unusable markers, empty input and malformed hashes never verify.
    """
    if not plain_password or not hashed_password or is_unusable_password(hashed_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def make_unusable_password() -> str:
    """Placeholder for accounts that have no password of their own."""
    return UNUSABLE_PASSWORD_PREFIX + secrets.token_hex(32)


def is_unusable_password(hashed_password: Optional[str]) -> bool:
    return not hashed_password or hashed_password.startswith(UNUSABLE_PASSWORD_PREFIX)


@lru_cache
def _dummy_hash() -> str:
    return hash_password(secrets.token_hex(16))


def burn_password_check(plain_password: str) -> None:
    """Spend the same bcrypt work as a real check when there is nothing to check."""
    candidate = (plain_password or "x").encode("utf-8")[:BCRYPT_MAX_BYTES]
    bcrypt.checkpw(candidate, _dummy_hash().encode("utf-8"))
