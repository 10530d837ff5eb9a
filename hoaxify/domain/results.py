"""
Operation results - Success and failure values returned by domain services.

Services return these instead of raising so that each failure branch
(and the rollback that goes with it) stays explicit at the call site.
Every failure knows its message key and the HTTP status it maps to.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar


@dataclass(frozen=True)
class Confirmation:
    """Successful outcome, carrying the key of the message to show."""

    message_key: str


@dataclass(frozen=True)
class Failure:
    """Base class for failed outcomes."""

    message_key: ClassVar[str] = "internal_failure"
    status_code: ClassVar[int] = 500


@dataclass(frozen=True)
class ValidationFailure(Failure):
    """One or more fields were rejected. Maps field -> message key, in field order."""

    message_key: ClassVar[str] = "validation_failure"
    status_code: ClassVar[int] = 400

    errors: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EmailFailure(Failure):
    """The activation email could not be sent; nothing was persisted."""

    message_key: ClassVar[str] = "email_failure"
    status_code: ClassVar[int] = 502


@dataclass(frozen=True)
class InvalidTokenFailure(Failure):
    """Token unknown, already consumed, or the account is already active."""

    message_key: ClassVar[str] = "account_activation_failure"
    status_code: ClassVar[int] = 400


@dataclass(frozen=True)
class UnexpectedFailure(Failure):
    """Anything the service could not classify."""


USER_CREATED = Confirmation("user_create_success")
ACCOUNT_ACTIVATED = Confirmation("account_activation_success")
