"""
Activation domain service - consume a token to activate its account.

    PENDING(token) -> ACTIVE   (token cleared, one-way)

A token that is unknown, already consumed, or belongs to an account
that is already active yields InvalidTokenFailure and changes nothing.
"""

import logging
from dataclasses import dataclass

from .ports import AccountRepository
from .results import ACCOUNT_ACTIVATED, Confirmation, InvalidTokenFailure

logger = logging.getLogger(__name__)


@dataclass
class ActivationService:
    """Domain service for account activation."""

    repository: AccountRepository

    async def activate(self, token: str) -> Confirmation | InvalidTokenFailure:
        """
        Activate the pending account that owns the token.

        Args:
            token: Activation token from the email link

        Returns:
            ACCOUNT_ACTIVATED if this call activated the account,
            InvalidTokenFailure otherwise
        """
        account = await self.repository.find_pending_by_token(token)
        if account is None:
            return InvalidTokenFailure()

        # activate() is conditional on the account still being inactive,
        # so a concurrent activation with the same token can only win once
        if not await self.repository.activate(account.id):
            return InvalidTokenFailure()

        logger.info("Account %s activated", account.id)
        return ACCOUNT_ACTIVATED
