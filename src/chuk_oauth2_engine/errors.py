# chuk_oauth2_engine/errors.py
"""Authorization failure taxonomy.

Every way an OAuth flow can fail is represented by a subclass of
:class:`AuthorizationFailure`. Flows never raise these; they return them
inside a :class:`~chuk_oauth2_engine.oauth_models.Failure`. RFC 6749 error
codes are mapped onto :class:`OAuthError` subclasses by
:func:`failure_from_error_data`.
"""

from typing import TYPE_CHECKING, Dict, Optional, Type

if TYPE_CHECKING:
    from .oauth_models import ErrorData, RawResponse


class InvalidRequestURLError(ValueError):
    """Raised when a request is constructed with a URL that is not valid."""

    def __init__(self, url: str):
        super().__init__(f"Not a valid URL: {url!r}")
        self.url = url


class AuthorizationFailure(Exception):
    """Base class for all authorization failures."""

    pass


class TransportError(AuthorizationFailure):
    """The transport or user-agent failed before a response was received."""

    def __init__(self, error: BaseException):
        super().__init__(f"Transport error: {error}")
        self.error = error


class UnexpectedServerResponse(AuthorizationFailure):
    """The server answered with a status code other than 200 or 400."""

    def __init__(self, response: "RawResponse"):
        super().__init__(f"Unexpected server response: HTTP {response.status_code}")
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code


class MissingParametersInRedirectionURI(AuthorizationFailure):
    """The redirect carried neither a ``code`` nor an ``error`` parameter."""

    def __init__(self, url: str):
        super().__init__(f"Redirection URI has no code or error parameter: {url}")
        self.url = url


class DecodeError(AuthorizationFailure):
    """The response body could not be parsed into the expected structure."""

    pass


class MissingHTTPResponse(DecodeError):
    """The transport completed without error but produced no HTTP response."""

    def __init__(self) -> None:
        super().__init__("No HTTP response received")


class EmptyResponseBody(DecodeError):
    """The response body was empty."""

    def __init__(self) -> None:
        super().__init__("Response body is empty")


class InvalidTextEncoding(DecodeError):
    """The response body could not be decoded with its declared charset."""

    def __init__(self, charset: str, error: Optional[UnicodeDecodeError] = None):
        super().__init__(f"Response body is not valid {charset}")
        self.charset = charset
        self.error = error


class MalformedJSON(DecodeError):
    """The response body declared JSON but did not parse."""

    def __init__(self, error: ValueError):
        super().__init__(f"Malformed JSON in response body: {error}")
        self.error = error


class NotAJSONObject(DecodeError):
    """The response body parsed as JSON, but not as an object."""

    def __init__(self, value_type: str):
        super().__init__(f"Expected a JSON object in response body, got {value_type}")
        self.value_type = value_type


class MissingAccessToken(AuthorizationFailure):
    """A successful token response did not contain ``access_token``."""

    def __init__(self) -> None:
        super().__init__("Response is missing the access_token field")


class MissingErrorField(AuthorizationFailure):
    """An error response did not contain the ``error`` field."""

    def __init__(self) -> None:
        super().__init__("Error response is missing the error field")


class OAuthError(AuthorizationFailure):
    """An RFC 6749 error returned by the authorization server."""

    error_code: str = ""

    def __init__(
        self, description: Optional[str] = None, error_uri: Optional[str] = None
    ):
        message = self.error_code
        if description:
            message = f"{message}: {description}"
        super().__init__(message)
        self.description = description
        self.error_uri = error_uri


class OAuthInvalidRequest(OAuthError):
    error_code = "invalid_request"


class OAuthUnauthorizedClient(OAuthError):
    error_code = "unauthorized_client"


class OAuthAccessDenied(OAuthError):
    error_code = "access_denied"


class OAuthUnsupportedResponseType(OAuthError):
    error_code = "unsupported_response_type"


class OAuthInvalidScope(OAuthError):
    error_code = "invalid_scope"


class OAuthServerError(OAuthError):
    error_code = "server_error"


class OAuthTemporarilyUnavailable(OAuthError):
    error_code = "temporarily_unavailable"


class OAuthUnknownError(OAuthError):
    """An error code outside the registered RFC 6749 set."""

    def __init__(
        self,
        error: str,
        description: Optional[str] = None,
        error_uri: Optional[str] = None,
    ):
        self.error_code = error
        super().__init__(description, error_uri)


class UserCanceled(OAuthAccessDenied):
    """The user dismissed the authorization page."""

    def __init__(self, description: str = "User canceled authentication"):
        super().__init__(description)


_REGISTERED_ERRORS: Dict[str, Type[OAuthError]] = {
    failure_type.error_code: failure_type
    for failure_type in (
        OAuthInvalidRequest,
        OAuthUnauthorizedClient,
        OAuthAccessDenied,
        OAuthUnsupportedResponseType,
        OAuthInvalidScope,
        OAuthServerError,
        OAuthTemporarilyUnavailable,
    )
}


def failure_from_error_data(error_data: "ErrorData") -> OAuthError:
    """
    Map a decoded error payload onto the failure taxonomy.

    Error codes are matched case-insensitively; unregistered codes become
    :class:`OAuthUnknownError` carrying the raw code.

    Args:
        error_data: Decoded ``error``/``error_description``/``error_uri``

    Returns:
        The matching OAuthError instance
    """
    failure_type = _REGISTERED_ERRORS.get(error_data.error.lower())
    if failure_type is None:
        return OAuthUnknownError(
            error_data.error, error_data.error_description, error_data.error_uri
        )
    return failure_type(error_data.error_description, error_data.error_uri)
