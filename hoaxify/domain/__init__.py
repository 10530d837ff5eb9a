"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration and activation logic. It defines
its own port interfaces for infrastructure abstraction; adapters for the
database and the mail transport live in hoaxify.adapters.
"""

from .account import Account, AccountState, NewAccount, RegistrationCandidate
from .activation import ActivationService
from .exceptions import (
    CompensationFailedError,
    DuplicateEmailError,
    EmailDeliveryError,
    HoaxifyError,
)
from .ports import AccountRepository, EmailSender, PasswordHasher
from .registration import RegistrationService
from .results import (
    Confirmation,
    EmailFailure,
    Failure,
    InvalidTokenFailure,
    UnexpectedFailure,
    ValidationFailure,
)
from .validation import AccountValidator, ErrorKey

__all__ = [
    "Account",
    "AccountRepository",
    "AccountState",
    "AccountValidator",
    "ActivationService",
    "CompensationFailedError",
    "Confirmation",
    "DuplicateEmailError",
    "EmailDeliveryError",
    "EmailFailure",
    "EmailSender",
    "ErrorKey",
    "Failure",
    "HoaxifyError",
    "InvalidTokenFailure",
    "NewAccount",
    "PasswordHasher",
    "RegistrationCandidate",
    "RegistrationService",
    "UnexpectedFailure",
    "ValidationFailure",
]
