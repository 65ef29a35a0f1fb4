# auth/service.py
"""
Session/identity service.

Handles:
- Signup against the local user table
- Login with password verification
- The session record that says who is logged in

This is a local gate, not a security boundary: there is no lockout or
rate limiting. Signup and login wait a short, configurable delay to
mimic a network round trip.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, List, Optional

from auth.models import Account, User
from auth.password import hash_password, password_too_long, verify_password
from storage import SESSION_KEY, USERS_KEY, KeyValueStore, StorageError, read_json, write_json

_logger = logging.getLogger(__name__)

SIGNUP_DELAY_SECONDS = 1.0
LOGIN_DELAY_SECONDS = 0.8
MIN_NAME_LENGTH = 2
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthError(Exception):
    """Base authentication error."""
    pass


class ValidationError(AuthError):
    """Signup input rejected (bad name, empty password, duplicate email)."""
    pass


class AuthenticationError(AuthError):
    """Invalid email or password."""
    pass


class SessionManager:
    """
    Owns the user table and the session record in a key-value store.

    No other component writes USERS_KEY or SESSION_KEY.
    """

    def __init__(
        self,
        store: KeyValueStore,
        signup_delay: float = SIGNUP_DELAY_SECONDS,
        login_delay: float = LOGIN_DELAY_SECONDS,
    ):
        """
        Initialize the session manager.

        Args:
            store: Backing key-value store
            signup_delay: Simulated latency for signup, in seconds
            login_delay: Simulated latency for login, in seconds
        """
        self._store = store
        self._signup_delay = signup_delay
        self._login_delay = login_delay

    # -------------------------------------------------------------------------
    # Session record
    # -------------------------------------------------------------------------

    def get_current_user(self) -> Optional[User]:
        """
        Get the logged-in user.

        Returns:
            User if a valid session record exists, None otherwise
        """
        data = read_json(self._store, SESSION_KEY)
        if data is None:
            return None

        try:
            return User.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            _logger.warning(f"Ignoring malformed session record: {e}")
            return None

    def _start_session(self, account: Account) -> User:
        user = account.to_session()
        try:
            write_json(self._store, SESSION_KEY, user.to_dict())
        except StorageError as e:
            # The caller still gets the user; the next reload will be logged out
            _logger.warning(f"Could not persist session for {account.email}: {e}")
        return user

    def logout(self) -> None:
        """Clear the session record. Safe to call when logged out."""
        self._store.remove(SESSION_KEY)

    # -------------------------------------------------------------------------
    # User table
    # -------------------------------------------------------------------------

    def _read_user_table(self) -> List[Any]:
        """Raw user table entries; a non-list value reads as empty."""
        raw = read_json(self._store, USERS_KEY, [])
        if not isinstance(raw, list):
            _logger.warning("Ignoring malformed user table")
            return []
        return raw

    def _load_accounts(self, raw: Optional[List[Any]] = None) -> List[Account]:
        """Parse the user table, skipping malformed entries."""
        if raw is None:
            raw = self._read_user_table()

        accounts = []
        for entry in raw:
            try:
                accounts.append(Account.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                _logger.warning(f"Skipping malformed user entry: {e}")
        return accounts

    def find_account(self, email: str) -> Optional[Account]:
        """Look up an account by case-insensitive email."""
        for account in self._load_accounts():
            if account.matches_email(email):
                return account
        return None

    async def signup(self, name: str, email: str, password: str) -> User:
        """
        Create an account and log it in.

        Args:
            name: Display name (at least 2 characters)
            email: Email address, unique case-insensitively
            password: Plain text password (stored hashed)

        Returns:
            The new session record (plan "free")

        Raises:
            ValidationError: If input is invalid or the email is taken
            StorageError: If the user table cannot be written
        """
        if self._signup_delay:
            await asyncio.sleep(self._signup_delay)

        name = (name or "").strip()
        email = (email or "").strip()

        if len(name) < MIN_NAME_LENGTH:
            raise ValidationError("Please enter a valid name.")
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please enter a valid email.")
        if not password:
            raise ValidationError("Password cannot be empty.")
        if password_too_long(password):
            raise ValidationError("Password is too long.")

        raw = self._read_user_table()
        if any(account.matches_email(email) for account in self._load_accounts(raw)):
            raise ValidationError("Email already registered.")

        account = Account.new(name=name, email=email, password_hash=hash_password(password))
        # Entries that fail to parse are kept as stored
        write_json(self._store, USERS_KEY, raw + [account.to_dict()])

        _logger.info(f"Created user: {email}")
        return self._start_session(account)

    async def login(self, email: str, password: str) -> User:
        """
        Authenticate and start a session.

        Returns:
            The session record

        Raises:
            AuthenticationError: If no account matches email and password
        """
        if self._login_delay:
            await asyncio.sleep(self._login_delay)

        account = self.find_account(email or "")
        if account is None or not verify_password(password, account.password_hash):
            _logger.warning(f"Failed login attempt for: {email}")
            raise AuthenticationError("Invalid email or password.")

        _logger.info(f"User authenticated: {email}")
        return self._start_session(account)
