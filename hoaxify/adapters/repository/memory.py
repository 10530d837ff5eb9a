"""
In-memory repository adapter - Implements AccountRepository protocol.

Keeps accounts in a dict keyed by id. Used for local development
(STORAGE_BACKEND=memory) and by the API tests. Email uniqueness is
enforced on create, like the database constraint.
"""

import asyncio
import itertools
from dataclasses import replace

from hoaxify.domain.account import Account, NewAccount
from hoaxify.domain.exceptions import DuplicateEmailError


class InMemoryAccountRepository:
    """Implements AccountRepository protocol with a process-local dict."""

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def create(self, account: NewAccount) -> Account:
        async with self._lock:
            if any(a.email == account.email for a in self._accounts.values()):
                raise DuplicateEmailError(account.email)
            created = Account(
                id=next(self._ids),
                username=account.username,
                email=account.email,
                password_hash=account.password_hash,
                inactive=True,
                activation_token=account.activation_token,
            )
            self._accounts[created.id] = created
            return created

    async def find_by_email(self, email: str) -> Account | None:
        return next((a for a in self._accounts.values() if a.email == email), None)

    async def find_pending_by_token(self, token: str) -> Account | None:
        return next(
            (a for a in self._accounts.values() if a.inactive and a.activation_token == token),
            None,
        )

    async def activate(self, account_id: int) -> bool:
        async with self._lock:
            account = self._accounts.get(account_id)
            if account is None or not account.inactive:
                return False
            self._accounts[account_id] = replace(account, inactive=False, activation_token=None)
            return True

    async def delete(self, account_id: int) -> None:
        async with self._lock:
            self._accounts.pop(account_id, None)

    def all(self) -> list[Account]:
        """Snapshot of every stored account, oldest first."""
        return list(self._accounts.values())

    def clear(self) -> None:
        self._accounts.clear()
