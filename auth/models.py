# auth/models.py
"""
Account and session models for the local identity table.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class Plan(str, Enum):
    """Subscription plans."""

    FREE = "free"
    STANDARD = "standard"
    PRO = "pro"


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass
class User:
    """
    Session record: the logged-in user without credential material.

    Attributes:
        id: Account ID (UUID)
        name: Display name
        email: Email as entered at signup
        plan: Subscription plan
        joined_at: Signup time in epoch milliseconds
    """
    id: str
    name: str
    email: str
    plan: Plan = Plan.FREE
    joined_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored session shape."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "plan": self.plan.value,
            "joinedAt": self.joined_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> User:
        """
        Build from a stored session record.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed
        """
        if not isinstance(data, dict):
            raise TypeError("Session record must be an object")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            email=str(data["email"]),
            plan=Plan(data.get("plan") or Plan.FREE.value),
            joined_at=int(data["joinedAt"]),
        )


@dataclass
class Account:
    """
    Stored account record.

    Attributes:
        id: Unique account ID (UUID)
        name: Display name
        email: Email as entered (matched case-insensitively)
        password_hash: Bcrypt-hashed password
        plan: Subscription plan
        joined_at: Signup time in epoch milliseconds
    """
    id: str
    name: str
    email: str
    password_hash: str
    plan: Plan = Plan.FREE
    joined_at: int = 0

    @classmethod
    def new(cls, name: str, email: str, password_hash: str) -> Account:
        """Create a new free-plan account with generated ID."""
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=password_hash,
            plan=Plan.FREE,
            joined_at=now_ms(),
        )

    def matches_email(self, email: str) -> bool:
        return self.email.lower() == email.strip().lower()

    def to_session(self) -> User:
        """Project to the session record (drops password_hash)."""
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            plan=self.plan,
            joined_at=self.joined_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored user-table shape."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "passwordHash": self.password_hash,
            "plan": self.plan.value,
            "joinedAt": self.joined_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Account:
        """
        Build from a stored user-table entry.

        Raises:
            KeyError, TypeError, ValueError: If the entry is malformed
        """
        if not isinstance(data, dict):
            raise TypeError("User entry must be an object")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            email=str(data["email"]),
            password_hash=str(data["passwordHash"]),
            plan=Plan(data.get("plan") or Plan.FREE.value),
            joined_at=int(data["joinedAt"]),
        )
