"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting domain services
and infrastructure adapters into routes. Adapters are created once by
the application lifespan and kept on app.state; services are cheap and
built per request.
"""

from fastapi import Depends, Request

from hoaxify.config.settings import Settings
from hoaxify.domain.activation import ActivationService
from hoaxify.domain.credentials import BcryptPasswordHasher
from hoaxify.domain.ports import AccountRepository, EmailSender
from hoaxify.domain.registration import RegistrationService
from hoaxify.i18n import Translator


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> AccountRepository:
    """Account store created during app lifespan startup."""
    return request.app.state.repository


def get_email_sender(request: Request) -> EmailSender:
    """Email sender created during app lifespan startup."""
    return request.app.state.email_sender


def get_translator(request: Request) -> Translator:
    return request.app.state.translator


def get_locale(request: Request, translator: Translator = Depends(get_translator)) -> str:
    """Locale requested through the Accept-Language header."""
    return translator.resolve_locale(request.headers.get("accept-language"))


def get_registration_service(
    repository: AccountRepository = Depends(get_repository),
    email_sender: EmailSender = Depends(get_email_sender),
    settings: Settings = Depends(get_settings_from_app),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository and email sender for the domain service.
    """
    return RegistrationService(
        repository=repository,
        email_sender=email_sender,
        password_hasher=BcryptPasswordHasher(settings.bcrypt_cost),
        compensation_attempts=settings.compensation_attempts,
    )


def get_activation_service(
    repository: AccountRepository = Depends(get_repository),
) -> ActivationService:
    return ActivationService(repository=repository)
