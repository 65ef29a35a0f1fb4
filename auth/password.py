# auth/password.py
"""
Password hashing using bcrypt.

The user table never holds plaintext passwords; only the bcrypt hash
(which embeds its salt) is stored.
"""

from __future__ import annotations

import logging
import os

import bcrypt

_logger = logging.getLogger(__name__)

# Work factor (cost). Tests lower it through LEGALIS_BCRYPT_ROUNDS.
BCRYPT_ROUNDS = int(os.environ.get("LEGALIS_BCRYPT_ROUNDS", "12"))

# bcrypt only uses the first 72 bytes; bcrypt>=5 rejects longer input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash string (includes salt)

    Raises:
        ValueError: If password is empty or longer than MAX_PASSWORD_BYTES
    """
    if not password:
        raise ValueError("Password cannot be empty")
    if password_too_long(password):
        raise ValueError(f"Password exceeds {MAX_PASSWORD_BYTES} bytes")

    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against its hash.

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    if not password or not password_hash:
        return False

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        _logger.warning(f"Password verification error: {e}")
        return False
