"""Tests for grant request models."""

import base64

import pytest
from pydantic import ValidationError

from chuk_oauth2_engine.errors import InvalidRequestURLError
from chuk_oauth2_engine.oauth_requests import (
    AuthorizationCodeRequest,
    ClientCredentialsRequest,
    HttpRequest,
    RefreshTokenRequest,
)


@pytest.fixture
def code_request():
    """Provide an authorization code request."""
    return AuthorizationCodeRequest(
        authorization_url="https://example.com/oauth/authorize",
        token_url="https://example.com/oauth/token",
        client_id="test_client_id",
        client_secret="test_client_secret",
        redirect_url="http://localhost:8765/callback",
        scope="read write",
        state="xyz",
    )


class TestAuthorizationCodeRequest:
    """Test authorization_code request construction."""

    def test_authorization_request(self, code_request):
        """Test the authorization-step query parameters."""
        request = code_request.authorization_request()

        assert request.method == "GET"
        assert request.url.startswith("https://example.com/oauth/authorize?")
        assert request.body is None
        assert request.query_parameters() == {
            "client_id": "test_client_id",
            "response_type": "code",
            "redirect_uri": "http://localhost:8765/callback",
            "scope": "read write",
            "state": "xyz",
        }

    def test_authorization_request_is_percent_encoded(self, code_request):
        """Test that values are percent-encoded in the URL."""
        url = code_request.authorization_request().url
        assert "redirect_uri=http%3A%2F%2Flocalhost%3A8765%2Fcallback" in url
        assert "scope=read%20write" in url

    def test_optional_parameters_omitted(self):
        """Test that scope and state are left out when not given."""
        request = AuthorizationCodeRequest(
            authorization_url="https://example.com/authorize",
            token_url="https://example.com/token",
            client_id="id",
            client_secret="secret",
            redirect_url="myapp://oauth/callback",
        ).authorization_request()

        params = request.query_parameters()
        assert "scope" not in params
        assert "state" not in params

    def test_existing_query_is_preserved(self):
        """Test that parameters are appended to an existing query."""
        request = AuthorizationCodeRequest(
            authorization_url="https://example.com/authorize?tenant=acme",
            token_url="https://example.com/token",
            client_id="id",
            client_secret="secret",
            redirect_url="https://app.example.com/cb",
        ).authorization_request()

        assert request.url.startswith("https://example.com/authorize?tenant=acme&")
        assert request.query_parameters()["tenant"] == "acme"

    def test_token_request(self, code_request):
        """Test the token-step form body."""
        request = code_request.token_request("abc")

        assert request.method == "POST"
        assert request.url == "https://example.com/oauth/token"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.form_fields() == {
            "client_id": "test_client_id",
            "client_secret": "test_client_secret",
            "grant_type": "authorization_code",
            "code": "abc",
            "redirect_uri": "http://localhost:8765/callback",
            "state": "xyz",
        }

    def test_token_request_encodes_reserved_characters(self, code_request):
        """Test that a code with reserved characters survives the form body."""
        request = code_request.token_request("a&b=c+d e")
        assert request.form_fields()["code"] == "a&b=c+d e"

    def test_request_is_immutable(self, code_request):
        """Test that requests cannot be mutated after construction."""
        with pytest.raises(ValidationError):
            code_request.client_id = "other"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("authorization_url", "not a url"),
            ("authorization_url", "/relative/path"),
            ("token_url", ""),
            ("token_url", "https://exa mple.com/token"),
            ("redirect_url", "callback"),
        ],
    )
    def test_invalid_url_rejected(self, field, value):
        """Test that invalid URLs fail construction."""
        kwargs = {
            "authorization_url": "https://example.com/authorize",
            "token_url": "https://example.com/token",
            "client_id": "id",
            "client_secret": "secret",
            "redirect_url": "https://app.example.com/cb",
        }
        kwargs[field] = value

        with pytest.raises(ValidationError) as exc_info:
            AuthorizationCodeRequest(**kwargs)

        assert "Not a valid URL" in str(exc_info.value)

    def test_invalid_url_is_value_error(self):
        """Test that construction errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            RefreshTokenRequest(
                token_url="nope",
                client_id="id",
                client_secret="secret",
                refresh_token="r",
            )

    def test_invalid_url_error_message(self):
        """Test InvalidRequestURLError carries the URL."""
        error = InvalidRequestURLError("bad url")
        assert error.url == "bad url"
        assert isinstance(error, ValueError)


class TestClientCredentialsRequest:
    """Test client_credentials request construction."""

    def test_authorization_header(self):
        """Test credentials sent as a Basic Authorization header."""
        request = ClientCredentialsRequest(
            authorization_url="https://example.com/token",
            client_id="client",
            client_secret="secret",
        ).authorization_request()

        assert request.method == "POST"
        expected = base64.b64encode(b"client:secret").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.form_fields() == {"grant_type": "client_credentials"}

    def test_credentials_as_parameters(self):
        """Test credentials sent as form parameters."""
        request = ClientCredentialsRequest(
            authorization_url="https://example.com/token",
            client_id="client",
            client_secret="secret",
            use_authorization_header=False,
        ).authorization_request()

        assert "Authorization" not in request.headers
        assert request.form_fields() == {
            "grant_type": "client_credentials",
            "client_id": "client",
            "client_secret": "secret",
        }

    @pytest.mark.parametrize("use_header", [True, False])
    @pytest.mark.parametrize("method", ["POST", "GET"])
    def test_credentials_placed_exactly_once(self, use_header, method):
        """Test that credentials are never sent in both places."""
        request = ClientCredentialsRequest(
            authorization_url="https://example.com/token",
            client_id="client",
            client_secret="secret",
            use_authorization_header=use_header,
            method=method,
        ).authorization_request()

        fields = {**request.query_parameters(), **request.form_fields()}
        has_header = "Authorization" in request.headers
        has_params = "client_id" in fields and "client_secret" in fields

        assert fields["grant_type"] == "client_credentials"
        assert has_header != has_params

    def test_get_uses_query_parameters(self):
        """Test the GET variant puts parameters in the URL."""
        request = ClientCredentialsRequest(
            authorization_url="https://example.com/token",
            client_id="client",
            client_secret="secret",
            method="GET",
            scope="api",
        ).authorization_request()

        assert request.method == "GET"
        assert request.body is None
        assert request.query_parameters() == {
            "grant_type": "client_credentials",
            "scope": "api",
        }

    def test_invalid_url_rejected(self):
        with pytest.raises(ValidationError):
            ClientCredentialsRequest(
                authorization_url="::::", client_id="c", client_secret="s"
            )


class TestRefreshTokenRequest:
    """Test refresh_token request construction."""

    def test_token_request(self):
        """Test the refresh form body."""
        request = RefreshTokenRequest(
            token_url="https://example.com/token",
            client_id="client",
            client_secret="secret",
            refresh_token="refresh+me",
        ).token_request()

        assert request.method == "POST"
        assert request.url == "https://example.com/token"
        assert request.form_fields() == {
            "client_id": "client",
            "client_secret": "secret",
            "grant_type": "refresh_token",
            "refresh_token": "refresh+me",
        }


class TestHttpRequest:
    """Test the HTTP request descriptor."""

    def test_to_httpx(self):
        """Test conversion to an httpx request."""
        request = HttpRequest(
            method="POST",
            url="https://example.com/token",
            headers={"Accept": "application/json"},
            body=b"a=1",
        )
        converted = request.to_httpx()

        assert converted.method == "POST"
        assert str(converted.url) == "https://example.com/token"
        assert converted.headers["Accept"] == "application/json"
        assert converted.content == b"a=1"

    def test_form_fields_without_body(self):
        request = HttpRequest(method="GET", url="https://example.com")
        assert request.form_fields() == {}
