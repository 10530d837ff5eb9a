"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Sign-up fields are optional on purpose: field rules (and their localized
messages) belong to the domain validator, not to request parsing.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ModelWrapValidatorHandler,
    PrivateAttr,
    model_validator,
)

from hoaxify.domain.account import RegistrationCandidate

SIGNUP_FIELDS = ("username", "email", "password")


class RegisterRequest(BaseModel):
    """
    Request model for user registration.

    Parsing never fails: a non-object body counts as empty, and a sign-up
    field holding a non-string value is set aside so the domain validator
    reports it alongside the other fields.
    """

    model_config = ConfigDict(extra="ignore")

    username: str | None = None
    email: str | None = None
    password: str | None = None
    inactive: Any = Field(
        default=None,
        description="Accepted for compatibility and ignored: new accounts are always inactive",
    )

    _invalid_fields: frozenset[str] = PrivateAttr(default_factory=frozenset)

    @model_validator(mode="wrap")
    @classmethod
    def set_aside_invalid_fields(
        cls, data: Any, handler: ModelWrapValidatorHandler["RegisterRequest"]
    ) -> "RegisterRequest":
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            data = {}
        invalid = [
            name for name in SIGNUP_FIELDS if data.get(name) is not None and not isinstance(data[name], str)
        ]
        model = handler({**data, **{name: None for name in invalid}})
        model._invalid_fields = frozenset(invalid)
        return model

    def to_candidate(self) -> RegistrationCandidate:
        return RegistrationCandidate(
            username=self.username,
            email=self.email,
            password=self.password,
            invalid_fields=self._invalid_fields,
        )


class MessageResponse(BaseModel):
    """Response model for successful operations."""

    message: str


class ErrorEnvelope(BaseModel):
    """Error body returned for every non-2xx response."""

    model_config = ConfigDict(populate_by_name=True)

    path: str
    timestamp: int = Field(..., description="Epoch milliseconds when the response was built")
    message: str
    validation_errors: dict[str, str] | None = Field(default=None, alias="validationErrors")

    def to_body(self) -> dict:
        """Wire representation: camelCase keys, validationErrors only when set."""
        return self.model_dump(by_alias=True, exclude_none=True)
