"""
API v1 routes.

Defines REST endpoints for user registration and account activation.
"""

from fastapi import APIRouter, Depends

from hoaxify.api.dependencies import (
    get_activation_service,
    get_locale,
    get_registration_service,
    get_translator,
)
from hoaxify.api.errors import FailureResponse
from hoaxify.api.models import ErrorEnvelope, MessageResponse, RegisterRequest
from hoaxify.domain.activation import ActivationService
from hoaxify.domain.registration import RegistrationService
from hoaxify.domain.results import Failure
from hoaxify.i18n import Translator

router = APIRouter(tags=["v1"])


@router.post(
    "/users",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorEnvelope, "description": "Validation failure"},
        502: {"model": ErrorEnvelope, "description": "Activation email could not be sent"},
    },
    summary="Register a new user",
    description="Create an inactive account and email its activation token.",
)
async def register(
    request_data: RegisterRequest | None = None,
    locale: str = Depends(get_locale),
    translator: Translator = Depends(get_translator),
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    """
    Register a new user and send the activation email.

    - **username**: 4 to 32 characters
    - **email**: Valid, unused email address
    - **password**: At least 6 characters with a lowercase letter,
      an uppercase letter and a digit

    Any `inactive` value in the body is ignored. A request without a body
    is validated as if every field were missing.
    """
    if request_data is None:
        request_data = RegisterRequest()
    result = await service.register(request_data.to_candidate())
    if isinstance(result, Failure):
        raise FailureResponse(result)
    return MessageResponse(message=translator.translate(result.message_key, locale))


@router.post(
    "/users/token/{token}",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorEnvelope, "description": "Token invalid or account already active"},
    },
    summary="Activate account with token",
    description="Submit the token received by email to activate the account.",
)
async def activate(
    token: str,
    locale: str = Depends(get_locale),
    translator: Translator = Depends(get_translator),
    service: ActivationService = Depends(get_activation_service),
) -> MessageResponse:
    result = await service.activate(token)
    if isinstance(result, Failure):
        raise FailureResponse(result)
    return MessageResponse(message=translator.translate(result.message_key, locale))
