# chuk_oauth2_engine/oauth_requests.py
"""Grant request models and the HTTP request descriptors they produce."""

from typing import Dict, Literal, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .encoding import (
    append_query,
    basic_authorization,
    encode_form,
    parse_form_data,
    query_parameters,
)
from .errors import InvalidRequestURLError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _validate_url(value: str, require_host: bool = True) -> str:
    """Check that a string is an absolute URL."""
    if not value or any(c.isspace() for c in value):
        raise InvalidRequestURLError(value)
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as e:
        raise InvalidRequestURLError(value) from e
    if not url.scheme or (require_host and not url.host):
        raise InvalidRequestURLError(value)
    return value


class HttpRequest(BaseModel):
    """Transport-agnostic description of an HTTP request."""

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[bytes] = None

    def query_parameters(self) -> Dict[str, str]:
        """Decoded query parameters of the request URL."""
        return query_parameters(self.url)

    def form_fields(self) -> Dict[str, str]:
        """Decoded form fields of the request body."""
        if not self.body:
            return {}
        return parse_form_data(self.body.decode("utf-8"))

    def to_httpx(self) -> httpx.Request:
        """Convert to an ``httpx.Request``."""
        return httpx.Request(
            self.method, self.url, headers=self.headers, content=self.body
        )


def _form_post(url: str, parameters: Dict[str, Optional[str]]) -> HttpRequest:
    return HttpRequest(
        method="POST",
        url=url,
        headers={"Content-Type": FORM_CONTENT_TYPE, "Accept": "application/json"},
        body=encode_form(parameters).encode("ascii"),
    )


class AuthorizationCodeRequest(BaseModel):
    """
    An OAuth 2.0 ``authorization_code`` request.

    This is a three-legged flow: the user signs in through a user-agent,
    which is redirected to ``redirect_url`` with a code that is then
    exchanged for tokens at ``token_url``.
    """

    model_config = ConfigDict(frozen=True)

    authorization_url: str
    token_url: str
    client_id: str
    client_secret: str
    redirect_url: str
    scope: Optional[str] = None
    state: Optional[str] = None

    @field_validator("authorization_url", "token_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return _validate_url(value)

    @field_validator("redirect_url")
    @classmethod
    def _check_redirect_url(cls, value: str) -> str:
        return _validate_url(value, require_host=False)

    def authorization_request(self) -> HttpRequest:
        """The request that loads the authorization page in the user-agent."""
        query = encode_form(
            {
                "client_id": self.client_id,
                "response_type": "code",
                "redirect_uri": self.redirect_url,
                "scope": self.scope,
                "state": self.state,
            }
        )
        return HttpRequest(
            method="GET", url=append_query(self.authorization_url, query)
        )

    def token_request(self, code: str) -> HttpRequest:
        """
        The request that exchanges an issued code for tokens.

        Args:
            code: Authorization code from the redirect

        Returns:
            POST request to the token URL
        """
        return _form_post(
            self.token_url,
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_url,
                "state": self.state,
            },
        )


class ClientCredentialsRequest(BaseModel):
    """
    An OAuth 2.0 ``client_credentials`` request (two-legged).

    With ``use_authorization_header`` the credentials go in an HTTP Basic
    ``Authorization`` header; otherwise they are sent as ``client_id`` and
    ``client_secret`` parameters. Never both.
    """

    model_config = ConfigDict(frozen=True)

    authorization_url: str
    client_id: str
    client_secret: str
    use_authorization_header: bool = True
    scope: Optional[str] = None
    method: Literal["POST", "GET"] = "POST"

    @field_validator("authorization_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return _validate_url(value)

    def authorization_request(self) -> HttpRequest:
        """The token request for this grant."""
        parameters: Dict[str, Optional[str]] = {"grant_type": "client_credentials"}
        headers = {"Accept": "application/json"}
        if self.use_authorization_header:
            headers["Authorization"] = basic_authorization(
                self.client_id, self.client_secret
            )
        else:
            parameters["client_id"] = self.client_id
            parameters["client_secret"] = self.client_secret
        parameters["scope"] = self.scope

        if self.method == "GET":
            return HttpRequest(
                method="GET",
                url=append_query(self.authorization_url, encode_form(parameters)),
                headers=headers,
            )

        request = _form_post(self.authorization_url, parameters)
        return request.model_copy(update={"headers": {**request.headers, **headers}})


class RefreshTokenRequest(BaseModel):
    """An OAuth 2.0 ``refresh_token`` request."""

    model_config = ConfigDict(frozen=True)

    token_url: str
    client_id: str
    client_secret: str
    refresh_token: str

    @field_validator("token_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return _validate_url(value)

    def token_request(self) -> HttpRequest:
        """The token request for this grant."""
        return _form_post(
            self.token_url,
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "refresh_token",
                "refresh_token": self.refresh_token,
            },
        )
