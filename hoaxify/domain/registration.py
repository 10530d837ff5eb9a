"""
Registration domain service - create an inactive account and mail its token.

Registration is a two-phase contract:

    1. validate -> hash password -> generate token -> create account
    2. send activation email
       - sent:   Confirmation (account pending activation)
       - failed: delete the account, then EmailFailure

The caller never observes an account whose activation email was not
sent. The rollback delete finishes before the failure is returned; if
it keeps failing after a bounded number of attempts the condition is
logged as critical and CompensationFailedError is raised.
"""

import logging
from dataclasses import dataclass, field

from .account import Account, NewAccount, RegistrationCandidate, normalize_email
from .credentials import BcryptPasswordHasher, generate_activation_token
from .exceptions import CompensationFailedError, DuplicateEmailError
from .ports import AccountRepository, EmailSender, PasswordHasher, TokenGenerator
from .results import USER_CREATED, Confirmation, EmailFailure, Failure, ValidationFailure
from .validation import AccountValidator, ErrorKey

logger = logging.getLogger(__name__)


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates the registration flow: validation, password hashing,
    token generation, persistence and activation email, with rollback
    of the persisted account when the email cannot be sent.
    """

    repository: AccountRepository
    email_sender: EmailSender
    password_hasher: PasswordHasher = field(default_factory=BcryptPasswordHasher)
    token_generator: TokenGenerator = generate_activation_token
    compensation_attempts: int = 3

    async def register(self, candidate: RegistrationCandidate) -> Confirmation | Failure:
        """
        Register a new inactive account and send its activation token.

        Args:
            candidate: Submitted username, email and password

        Returns:
            USER_CREATED on success, ValidationFailure when a field is
            rejected (including an email already in use), EmailFailure
            when the activation email could not be sent

        Raises:
            CompensationFailedError: If the account created for a failed
                email could not be deleted
        """
        errors = await AccountValidator(self.repository).validate(candidate)
        if errors:
            return ValidationFailure(errors)

        account = self._prepare_account(candidate)
        created = await self._create_account(account)
        if isinstance(created, Failure):
            return created

        failure = await self._send_activation(created.email, account.activation_token)
        if failure is not None:
            await self._rollback(created)
            return failure

        logger.info("Account %s created for %s, pending activation", created.id, created.email)
        return USER_CREATED

    def _prepare_account(self, candidate: RegistrationCandidate) -> NewAccount:
        username, email, password = candidate.username, candidate.email, candidate.password
        if username is None or email is None or password is None:
            raise ValueError("Registration candidate is missing a validated field")
        return NewAccount(
            username=username,
            email=normalize_email(email),
            password_hash=self.password_hasher.hash(password),
            activation_token=self.token_generator(),
        )

    async def _create_account(self, account: NewAccount) -> Account | Failure:
        try:
            return await self.repository.create(account)
        except DuplicateEmailError:
            # Lost a race with a concurrent registration for the same email
            logger.info("Email %s claimed concurrently", account.email)
            return ValidationFailure({"email": ErrorKey.EMAIL_INUSE})

    async def _send_activation(self, email: str, token: str) -> EmailFailure | None:
        try:
            await self.email_sender.send_account_activation(email, token)
        except Exception:
            logger.warning("Activation email to %s failed", email, exc_info=True)
            return EmailFailure()
        return None

    async def _rollback(self, account: Account) -> None:
        """Delete the account whose activation email could not be sent."""
        last_error: Exception | None = None
        for attempt in range(1, self.compensation_attempts + 1):
            try:
                await self.repository.delete(account.id)
            except Exception as e:
                last_error = e
                logger.error(
                    "Rollback of account %s failed (attempt %d/%d): %s",
                    account.id,
                    attempt,
                    self.compensation_attempts,
                    e,
                )
                continue
            logger.info("Rolled back account %s after email failure", account.id)
            return

        logger.critical(
            "Account %s (%s) left without activation email; manual cleanup required",
            account.id,
            account.email,
        )
        raise CompensationFailedError(account.id, account.email) from last_error
