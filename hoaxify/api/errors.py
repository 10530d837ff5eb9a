"""
Error envelope - uniform body for every failed request.

    {path, timestamp, message, validationErrors?}

Messages are resolved with the locale taken from the request's
Accept-Language header. Routes raise FailureResponse with a domain
Failure; the handlers registered here render it, and also render
request parsing errors, HTTP errors and unexpected exceptions in the
same shape.
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hoaxify.api.models import ErrorEnvelope
from hoaxify.domain.results import Failure, UnexpectedFailure, ValidationFailure
from hoaxify.domain.validation import ErrorKey
from hoaxify.i18n import Translator

logger = logging.getLogger(__name__)

# Framework-raised HTTP errors with a localized message
HTTP_ERROR_KEYS = {
    404: "not_found",
    405: "method_not_allowed",
}


class FailureResponse(Exception):
    """Raised by routes to end a request with a domain failure."""

    def __init__(self, failure: Failure) -> None:
        self.failure = failure
        super().__init__(type(failure).__name__)


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def format_failure(
    failure: Failure,
    *,
    path: str,
    locale: str,
    translator: Translator,
    timestamp: int | None = None,
) -> ErrorEnvelope:
    """
    Map a domain failure to the error envelope.

    Args:
        failure: Failure returned by a domain service
        path: Requested path, echoed back verbatim
        locale: Locale used for every message in the envelope
        translator: Message catalog
        timestamp: Epoch milliseconds, defaults to now

    Returns:
        Envelope with validationErrors set only for ValidationFailure
        carrying field errors
    """
    validation_errors = None
    if isinstance(failure, ValidationFailure) and failure.errors:
        validation_errors = {
            field: translator.translate(key, locale) for field, key in failure.errors.items()
        }

    return ErrorEnvelope(
        path=path,
        timestamp=now_millis() if timestamp is None else timestamp,
        message=translator.translate(failure.message_key, locale),
        validation_errors=validation_errors,
    )


def _translator(request: Request) -> Translator:
    return request.app.state.translator


def _locale(request: Request) -> str:
    return _translator(request).resolve_locale(request.headers.get("accept-language"))


def request_path(request: Request) -> str:
    """Path as the client sent it, percent-escapes included."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1")
    return request.url.path


def render_failure(request: Request, failure: Failure) -> JSONResponse:
    envelope = format_failure(
        failure,
        path=request_path(request),
        locale=_locale(request),
        translator=_translator(request),
    )
    return JSONResponse(status_code=failure.status_code, content=envelope.to_body())


def register_error_handlers(app: FastAPI) -> None:
    """Install the envelope renderers on the application."""

    @app.exception_handler(FailureResponse)
    async def handle_failure(request: Request, exc: FailureResponse) -> JSONResponse:
        logger.info(
            "Request failed: %s (status: %d)",
            type(exc.failure).__name__,
            exc.failure.status_code,
            extra={"path": request.url.path, "method": request.method},
        )
        return render_failure(request, exc.failure)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = {}
        for error in exc.errors():
            loc = error.get("loc", ())
            # ("body", "username") -> "username"; ("body", 12) is a JSON
            # decode position, not a field
            if len(loc) > 1 and isinstance(loc[-1], str) and loc[-1] not in fields:
                fields[loc[-1]] = ErrorKey.VALUE_INVALID
        return render_failure(request, ValidationFailure(fields))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        key = HTTP_ERROR_KEYS.get(exc.status_code)
        if key is None:
            message = str(exc.detail)
        else:
            message = _translator(request).translate(key, _locale(request))
        envelope = ErrorEnvelope(path=request_path(request), timestamp=now_millis(), message=message)
        return JSONResponse(status_code=exc.status_code, content=envelope.to_body(), headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return render_failure(request, UnexpectedFailure())
