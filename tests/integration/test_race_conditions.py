"""
Integration tests for concurrent registrations of the same email.

Validation and insert are not one transaction, so concurrent sign-ups
can all pass the uniqueness lookup. The UNIQUE constraint decides, and
the losers must see "email in use", not an error.
"""

import asyncio

import pytest
from psycopg_pool import AsyncConnectionPool

from hoaxify.adapters.repository.postgres import PostgresAccountRepository
from hoaxify.domain.account import RegistrationCandidate
from hoaxify.domain.registration import RegistrationService
from hoaxify.domain.results import USER_CREATED, ValidationFailure
from hoaxify.domain.validation import ErrorKey

pytestmark = pytest.mark.integration


class PlainHasher:
    def hash(self, password: str) -> str:
        return f"hashed:{password}"


class TestConcurrentRegistration:
    """Concurrent registrations for one email."""

    @pytest.mark.asyncio
    async def test_exactly_one_registration_succeeds(
        self, pg_repository: PostgresAccountRepository, pool: AsyncConnectionPool, email_sender
    ) -> None:
        service = RegistrationService(
            repository=pg_repository,
            email_sender=email_sender,
            password_hasher=PlainHasher(),
        )
        candidates = [
            RegistrationCandidate(username=f"user{i}", email="race@example.com", password="P4ssword")
            for i in range(10)
        ]

        results = await asyncio.gather(*(service.register(c) for c in candidates))

        assert results.count(USER_CREATED) == 1
        losers = [r for r in results if r != USER_CREATED]
        assert all(r == ValidationFailure({"email": ErrorKey.EMAIL_INUSE}) for r in losers)
        assert len(email_sender.sent) == 1

        async with pool.connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM users WHERE email = %s", ("race@example.com",))
            assert (await cursor.fetchone())[0] == 1
