"""
Account entity and registration input.

An account has two states. It is PENDING from creation until its
activation token is consumed, then ACTIVE for good:

    PENDING(token) -> ACTIVE   (token submitted, token cleared)

There is no way back and no re-issuance of tokens.
"""

from dataclasses import dataclass
from enum import Enum


class AccountState(str, Enum):
    """Lifecycle states of an account."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"


@dataclass(frozen=True)
class RegistrationCandidate:
    """
    Unvalidated sign-up data as submitted by the caller.

    invalid_fields names fields whose submitted value was not a string;
    their value here is None and they are reported as invalid.
    """

    username: str | None = None
    email: str | None = None
    password: str | None = None
    invalid_fields: frozenset[str] = frozenset()


@dataclass(frozen=True)
class NewAccount:
    """Account ready to be persisted. Always created inactive."""

    username: str
    email: str
    password_hash: str
    activation_token: str


@dataclass(frozen=True)
class Account:
    """Persisted account record."""

    id: int
    username: str
    email: str
    password_hash: str
    inactive: bool
    activation_token: str | None

    @property
    def state(self) -> AccountState:
        return AccountState.PENDING if self.inactive else AccountState.ACTIVE


def normalize_email(email: str) -> str:
    """Strip whitespace and lowercase for consistent storage and lookup."""
    return email.strip().lower()
