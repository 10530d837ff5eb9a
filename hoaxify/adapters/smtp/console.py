"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging activation tokens for local development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For development purposes - never fails.
    """

    def __init__(self, activation_url: str = "") -> None:
        self._activation_url = activation_url

    async def send_account_activation(self, email: str, token: str) -> None:
        """
        Log the activation link instead of sending it.

        Args:
            email: Recipient email address (normalized by domain layer)
            token: Activation token
        """
        logger.info("[ACTIVATION] Email: %s Token: %s Link: %s%s", email, token, self._activation_url, token)
