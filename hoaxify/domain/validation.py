"""
Sign-up validation - ordered per-field rules plus an async uniqueness check.

Each field owns an ordered list of (predicate, error key) pairs. Rules for
a field stop at the first violation, so a field reports at most one
error. Fields are independent: every field is checked and all violations
are reported together, always in the order username, email, password.

The engine is locale-agnostic: it returns error keys, and the API layer
turns them into text for the caller's language.
"""

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from email_validator import EmailNotValidError, validate_email

from .account import RegistrationCandidate, normalize_email
from .ports import AccountRepository

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 6

_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9]).*$", re.DOTALL)


class ErrorKey(str, Enum):
    """Field-level error keys, resolved to text by the translator."""

    USERNAME_NULL = "username_null"
    USERNAME_SIZE = "username_size"
    EMAIL_NULL = "email_null"
    EMAIL_INVALID = "email_invalid"
    EMAIL_INUSE = "email_inuse"
    PASSWORD_NULL = "password_null"
    PASSWORD_SIZE = "password_size"
    PASSWORD_PATTERN = "password_pattern"
    VALUE_INVALID = "value_invalid"


@dataclass(frozen=True)
class Rule:
    """A predicate the value must satisfy, and the key reported if it doesn't."""

    check: Callable[[str], bool]
    error: ErrorKey


def is_present(value: str | None) -> bool:
    return value is not None and value != ""


def has_length(minimum: int, maximum: int | None = None) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        if len(value) < minimum:
            return False
        return maximum is None or len(value) <= maximum

    return check


def is_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def has_mixed_characters(value: str) -> bool:
    """At least one lowercase letter, one uppercase letter and one digit."""
    return _PASSWORD_PATTERN.match(value) is not None


# Presence is checked first, so these only ever see non-empty strings.

USERNAME_RULES = (Rule(has_length(USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH), ErrorKey.USERNAME_SIZE),)
EMAIL_RULES = (Rule(is_email, ErrorKey.EMAIL_INVALID),)
PASSWORD_RULES = (
    Rule(has_length(PASSWORD_MIN_LENGTH), ErrorKey.PASSWORD_SIZE),
    Rule(has_mixed_characters, ErrorKey.PASSWORD_PATTERN),
)

AsyncRule = Callable[[str], Awaitable[ErrorKey | None]]


@dataclass(frozen=True)
class FieldSpec:
    """Everything checked for one field, in evaluation order."""

    name: str
    null_error: ErrorKey
    rules: tuple[Rule, ...]


FIELDS = (
    FieldSpec("username", ErrorKey.USERNAME_NULL, USERNAME_RULES),
    FieldSpec("email", ErrorKey.EMAIL_NULL, EMAIL_RULES),
    FieldSpec("password", ErrorKey.PASSWORD_NULL, PASSWORD_RULES),
)


def first_violation(value: str | None, spec: FieldSpec) -> ErrorKey | None:
    """Return the first rule the value breaks, or None if it passes them all."""
    if not is_present(value):
        return spec.null_error
    for rule in spec.rules:
        if not rule.check(value):
            return rule.error
    return None


class AccountValidator:
    """
    Validates sign-up candidates.

    Synchronous rules run first for each field; a field that passes them
    may still have async rules (the email uniqueness lookup) that are
    awaited before its verdict is final. Only one store read is made,
    and only when the email is syntactically valid.
    """

    def __init__(self, repository: AccountRepository) -> None:
        self._repository = repository
        self._async_rules: dict[str, tuple[AsyncRule, ...]] = {
            "email": (self._email_not_in_use,),
        }

    async def validate(self, candidate: RegistrationCandidate) -> dict[str, ErrorKey]:
        """
        Check every field of the candidate.

        Returns:
            Mapping of field name to error key, in field order.
            Empty when the candidate is valid.
        """
        errors: dict[str, ErrorKey] = {}
        for spec in FIELDS:
            if spec.name in candidate.invalid_fields:
                errors[spec.name] = ErrorKey.VALUE_INVALID
                continue
            value = getattr(candidate, spec.name)
            error = first_violation(value, spec)
            if error is None:
                for rule in self._async_rules.get(spec.name, ()):
                    error = await rule(value)
                    if error is not None:
                        break
            if error is not None:
                errors[spec.name] = error
        return errors

    async def _email_not_in_use(self, email: str) -> ErrorKey | None:
        existing = await self._repository.find_by_email(normalize_email(email))
        return ErrorKey.EMAIL_INUSE if existing is not None else None
