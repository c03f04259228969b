# chuk_oauth2_engine/oauth_models.py
"""Token, error and response models."""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import (
    AuthorizationFailure,
    MissingAccessToken,
    MissingErrorField,
    OAuthError,
    failure_from_error_data,
)


def _optional_str(payload: Mapping[str, Any], name: str) -> Optional[str]:
    value = payload.get(name)
    return value if isinstance(value, str) else None


def _parse_seconds(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        # plain ASCII digits only: no sign, underscores or other scripts
        text = value.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    return None


class AuthorizationData(BaseModel):
    """Tokens returned by the server for a successful authorization."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = None
    expires_in_seconds: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AuthorizationData":
        """
        Build authorization data from a decoded token response.

        Lifetime is read from ``expires_in`` first; some servers send it as
        a string under ``expires`` instead.

        Args:
            payload: Decoded JSON object or form fields

        Returns:
            AuthorizationData instance

        Raises:
            MissingAccessToken: If ``access_token`` is absent or empty
        """
        access_token = _optional_str(payload, "access_token")
        if not access_token:
            raise MissingAccessToken()

        expires_in = _parse_seconds(payload.get("expires_in"))
        if expires_in is None:
            expires = payload.get("expires")
            if isinstance(expires, str):
                expires_in = _parse_seconds(expires)

        return cls(
            access_token=access_token,
            refresh_token=_optional_str(payload, "refresh_token"),
            expires_in_seconds=expires_in,
        )


class ErrorData(BaseModel):
    """RFC 6749 error payload."""

    model_config = ConfigDict(frozen=True)

    error: str = Field(..., min_length=1)
    error_description: Optional[str] = None
    error_uri: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ErrorData":
        """
        Build error data from a decoded error response.

        Raises:
            MissingErrorField: If ``error`` is absent or empty
        """
        error = _optional_str(payload, "error")
        if not error:
            raise MissingErrorField()
        return cls(
            error=error,
            error_description=_optional_str(payload, "error_description"),
            error_uri=_optional_str(payload, "error_uri"),
        )

    def as_authorization_failure(self) -> OAuthError:
        """Map this payload onto the failure taxonomy."""
        return failure_from_error_data(self)


class RawResponse(BaseModel):
    """An HTTP response as received from the transport."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    url: Optional[str] = None

    def header(self, name: str) -> Optional[str]:
        """Look up a header case-insensitively."""
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None


@dataclass(frozen=True)
class Success:
    """A completed authorization."""

    data: AuthorizationData

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> AuthorizationData:
        return self.data


@dataclass(frozen=True)
class Failure:
    """A failed authorization."""

    failure: AuthorizationFailure

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> AuthorizationData:
        """Raise the carried failure."""
        raise self.failure


Response = Union[Success, Failure]
