# auth/__init__.py
"""
Authentication module.

Provides:
- Account model stored in the local user table
- Session record (User) describing who is logged in
- Password hashing with bcrypt
"""

from auth.models import Account, Plan, User
from auth.service import (
    AuthError,
    AuthenticationError,
    SessionManager,
    ValidationError,
)

__all__ = [
    "Account",
    "Plan",
    "User",
    "AuthError",
    "AuthenticationError",
    "SessionManager",
    "ValidationError",
]
