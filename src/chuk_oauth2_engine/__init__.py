"""OAuth 2.0 Client Engine - request construction, grant flows and response decoding.

This library drives OAuth 2.0 grant flows from the client side:
- Authorization Code grant (user-agent redirect capture + code exchange)
- Client Credentials grant
- Refresh Token grant
- Response classification and RFC 6749 error mapping

The network transport and the user-agent are injected, so flows can run
against httpx, a browser, or test doubles.
"""

from .config import EngineConfig
from .errors import (
    AuthorizationFailure,
    DecodeError,
    EmptyResponseBody,
    InvalidRequestURLError,
    InvalidTextEncoding,
    MalformedJSON,
    MissingAccessToken,
    MissingErrorField,
    MissingHTTPResponse,
    MissingParametersInRedirectionURI,
    NotAJSONObject,
    OAuthAccessDenied,
    OAuthError,
    OAuthInvalidRequest,
    OAuthInvalidScope,
    OAuthServerError,
    OAuthTemporarilyUnavailable,
    OAuthUnauthorizedClient,
    OAuthUnknownError,
    OAuthUnsupportedResponseType,
    TransportError,
    UnexpectedServerResponse,
    UserCanceled,
    failure_from_error_data,
)
from .oauth_flow import OAuth2Flow
from .oauth_models import (
    AuthorizationData,
    ErrorData,
    Failure,
    RawResponse,
    Response,
    Success,
)
from .oauth_requests import (
    AuthorizationCodeRequest,
    ClientCredentialsRequest,
    HttpRequest,
    RefreshTokenRequest,
)
from .response_decoder import decode_response
from .transport import HttpxTransport, Transport
from .user_agent import (
    LoadError,
    LoopbackBrowserUserAgent,
    Redirected,
    ResponseError,
    UserAgent,
)

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "OAuth2Flow",
    "AuthorizationCodeRequest",
    "ClientCredentialsRequest",
    "RefreshTokenRequest",
    "HttpRequest",
    "AuthorizationData",
    "ErrorData",
    "RawResponse",
    "Response",
    "Success",
    "Failure",
    "decode_response",
    "Transport",
    "HttpxTransport",
    "UserAgent",
    "LoopbackBrowserUserAgent",
    "Redirected",
    "ResponseError",
    "LoadError",
    "AuthorizationFailure",
    "TransportError",
    "UnexpectedServerResponse",
    "MissingParametersInRedirectionURI",
    "DecodeError",
    "MissingHTTPResponse",
    "EmptyResponseBody",
    "InvalidTextEncoding",
    "MalformedJSON",
    "NotAJSONObject",
    "MissingAccessToken",
    "MissingErrorField",
    "OAuthError",
    "OAuthInvalidRequest",
    "OAuthUnauthorizedClient",
    "OAuthAccessDenied",
    "OAuthUnsupportedResponseType",
    "OAuthInvalidScope",
    "OAuthServerError",
    "OAuthTemporarilyUnavailable",
    "OAuthUnknownError",
    "UserCanceled",
    "InvalidRequestURLError",
    "failure_from_error_data",
]
