"""
Unit tests for ActivationService.

Tests the PENDING -> ACTIVE transition: tokens are single use, unknown
tokens change nothing.
"""

from unittest.mock import AsyncMock

import pytest

from hoaxify.domain.account import Account, AccountState, NewAccount
from hoaxify.domain.activation import ActivationService
from hoaxify.domain.results import ACCOUNT_ACTIVATED, InvalidTokenFailure


async def add_pending(repository, email: str = "user1@gmail.com", token: str = "tok-1"):
    return await repository.create(
        NewAccount(username="user1", email=email, password_hash="hashed", activation_token=token)
    )


class TestActivate:
    """Tests for activate()."""

    @pytest.mark.asyncio
    async def test_correct_token_activates_account(self, repository) -> None:
        await add_pending(repository)

        result = await ActivationService(repository).activate("tok-1")

        assert result == ACCOUNT_ACTIVATED
        account = await repository.find_by_email("user1@gmail.com")
        assert account.inactive is False
        assert account.state is AccountState.ACTIVE

    @pytest.mark.asyncio
    async def test_activation_clears_token(self, repository) -> None:
        await add_pending(repository)

        await ActivationService(repository).activate("tok-1")

        account = await repository.find_by_email("user1@gmail.com")
        assert account.activation_token is None

    @pytest.mark.asyncio
    async def test_unknown_token_fails_without_mutation(self, repository) -> None:
        created = await add_pending(repository)

        result = await ActivationService(repository).activate("invalidToken")

        assert result == InvalidTokenFailure()
        assert await repository.find_by_email("user1@gmail.com") == created

    @pytest.mark.asyncio
    async def test_token_is_single_use(self, repository) -> None:
        await add_pending(repository)
        service = ActivationService(repository)
        await service.activate("tok-1")
        activated = await repository.find_by_email("user1@gmail.com")

        result = await service.activate("tok-1")

        assert result == InvalidTokenFailure()
        assert await repository.find_by_email("user1@gmail.com") == activated

    @pytest.mark.asyncio
    async def test_only_token_owner_is_activated(self, repository) -> None:
        await add_pending(repository, "one@gmail.com", "tok-1")
        await add_pending(repository, "two@gmail.com", "tok-2")

        await ActivationService(repository).activate("tok-2")

        assert (await repository.find_by_email("one@gmail.com")).inactive is True
        assert (await repository.find_by_email("two@gmail.com")).inactive is False

    @pytest.mark.asyncio
    async def test_lost_activation_race_is_invalid_token(self) -> None:
        """If another request activated the account in between, this one fails."""
        repo = AsyncMock()
        repo.find_pending_by_token.return_value = Account(
            id=1, username="user1", email="user1@gmail.com", password_hash="h", inactive=True, activation_token="tok-1"
        )
        repo.activate.return_value = False

        assert await ActivationService(repo).activate("tok-1") == InvalidTokenFailure()

    @pytest.mark.asyncio
    async def test_unknown_token_never_calls_activate(self) -> None:
        repo = AsyncMock()
        repo.find_pending_by_token.return_value = None

        await ActivationService(repo).activate("nope")

        repo.activate.assert_not_awaited()
