"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory account store
- Email sender doubles (recording, switchable to failure)
- Application and test client wired to both
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from hoaxify.adapters.repository.memory import InMemoryAccountRepository
from hoaxify.api.main import create_app
from hoaxify.config.settings import Settings
from hoaxify.domain.exceptions import EmailDeliveryError

VALID_USER = {
    "username": "user1",
    "email": "user1@gmail.com",
    "password": "P4ssword",
}


class RecordingEmailSender:
    """EmailSender double that keeps every message, or rejects them all."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    async def send_account_activation(self, email: str, token: str) -> None:
        if self.fail:
            raise EmailDeliveryError("553 invalid mailbox")
        self.sent.append((email, token))

    @property
    def last(self) -> tuple[str, str]:
        return self.sent[-1]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        storage_backend="memory",
        email_backend="console",
        default_locale="en",
    )


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def app(
    settings: Settings,
    repository: InMemoryAccountRepository,
    email_sender: RecordingEmailSender,
) -> FastAPI:
    """Application backed by the in-memory store and the recording sender."""
    return create_app(settings, repository=repository, email_sender=email_sender)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)
