"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .account import Account, NewAccount


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    async def create(self, account: NewAccount) -> Account:
        """
        Persist a new inactive account holding its activation token.

        Args:
            account: Validated account with hashed password and token

        Returns:
            The stored account, including its generated id

        Raises:
            DuplicateEmailError: If another account already owns the email
        """
        ...

    async def find_by_email(self, email: str) -> Account | None:
        """Return the account bound to a normalized email, if any."""
        ...

    async def find_pending_by_token(self, token: str) -> Account | None:
        """Return the inactive account holding the token, if any."""
        ...

    async def activate(self, account_id: int) -> bool:
        """
        Mark the account active and clear its activation token.

        The update only applies while the account is still inactive.

        Returns:
            True if this call performed the transition, False otherwise
        """
        ...

    async def delete(self, account_id: int) -> None:
        """Remove an account. Deleting a missing account is a no-op."""
        ...


class EmailSender(Protocol):
    """Port interface for activation email delivery."""

    async def send_account_activation(self, email: str, token: str) -> None:
        """
        Send the activation message for a freshly created account.

        Args:
            email: Recipient email address
            token: Activation token to embed in the message

        Raises:
            EmailDeliveryError: If the transport rejected the message
        """
        ...


class PasswordHasher(Protocol):
    """Port interface for one-way password hashing."""

    def hash(self, password: str) -> str: ...


class TokenGenerator(Protocol):
    """Port interface for activation token generation."""

    def __call__(self) -> str: ...
