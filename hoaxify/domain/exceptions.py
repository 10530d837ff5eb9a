"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class HoaxifyError(Exception):
    """Base class for registration domain errors."""

    pass


class DuplicateEmailError(HoaxifyError):
    """The store rejected an account because its email is already bound."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(email)


class EmailDeliveryError(HoaxifyError):
    """The activation message could not be handed to the mail transport."""

    pass


class CompensationFailedError(HoaxifyError):
    """An account created for a failed registration could not be removed."""

    def __init__(self, account_id: int, email: str) -> None:
        self.account_id = account_id
        self.email = email
        super().__init__(f"Failed to roll back account {account_id} ({email})")
