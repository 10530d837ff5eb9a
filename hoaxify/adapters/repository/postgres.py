"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 (async pool) with raw SQL.

The users table enforces the account invariants itself:
- UNIQUE (email): the last line of defense when two registrations for
  the same email race past validation. The violation is surfaced as
  DuplicateEmailError.
- CHECK (inactive = (activation_token IS NOT NULL)): a token exists
  exactly while the account is pending.
"""

import logging
from pathlib import Path

from psycopg import errors
from psycopg.rows import class_row
from psycopg_pool import AsyncConnectionPool

from hoaxify.domain.account import Account, NewAccount
from hoaxify.domain.exceptions import DuplicateEmailError

logger = logging.getLogger(__name__)

EMAIL_UNIQUE_CONSTRAINT = "users_email_key"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"

_COLUMNS = "id, username, email, password_hash, inactive, activation_token"


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 AsyncConnectionPool for database connections
        """
        self._pool = pool

    async def create(self, account: NewAccount) -> Account:
        """
        Insert a new inactive account.

        Raises:
            DuplicateEmailError: If the email UNIQUE constraint is violated
        """
        sql = f"""
            INSERT INTO users (username, email, password_hash, inactive, activation_token)
            VALUES (%s, %s, %s, TRUE, %s)
            RETURNING {_COLUMNS}
        """

        async with self._pool.connection() as conn:
            try:
                async with conn.cursor(row_factory=class_row(Account)) as cursor:
                    await cursor.execute(
                        sql,
                        (
                            account.username,
                            account.email,
                            account.password_hash,
                            account.activation_token,
                        ),
                    )
                    created = await cursor.fetchone()
                await conn.commit()
            except errors.UniqueViolation as e:
                await conn.rollback()
                if e.diag.constraint_name == EMAIL_UNIQUE_CONSTRAINT:
                    raise DuplicateEmailError(account.email) from e
                raise

        if created is None:
            raise RuntimeError("INSERT ... RETURNING produced no row")
        return created

    async def find_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM users WHERE email = %s"
        return await self._fetch_one(sql, (email,))

    async def find_pending_by_token(self, token: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM users WHERE activation_token = %s AND inactive"
        return await self._fetch_one(sql, (token,))

    async def activate(self, account_id: int) -> bool:
        """
        Flip a pending account to active and clear its token.

        The WHERE inactive guard makes the transition happen at most once.
        """
        sql = """
            UPDATE users
            SET inactive = FALSE, activation_token = NULL
            WHERE id = %s AND inactive
        """

        async with self._pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute(sql, (account_id,))
            await conn.commit()
            return cursor.rowcount == 1

    async def delete(self, account_id: int) -> None:
        async with self._pool.connection() as conn:
            await conn.execute("DELETE FROM users WHERE id = %s", (account_id,))
            await conn.commit()

    async def _fetch_one(self, sql: str, params: tuple) -> Account | None:
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=class_row(Account)) as cursor:
                await cursor.execute(sql, params)
                row = await cursor.fetchone()
            await conn.commit()
            return row


async def run_migrations(pool: AsyncConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 AsyncConnectionPool instance
    """
    if not MIGRATIONS_DIR.exists():
        logger.warning(f"Migrations directory not found: {MIGRATIONS_DIR}")
        return

    sql_files = sorted(MIGRATIONS_DIR.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            async with pool.connection() as conn:
                await conn.execute(sql_content)
                await conn.commit()

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
