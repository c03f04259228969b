"""Tests for verbose HTTP dumps."""

import json

from chuk_oauth2_engine.http_logging import (
    REDACTED,
    dump_request,
    dump_response,
    redact_form,
    redact_url,
)
from chuk_oauth2_engine.oauth_models import RawResponse
from chuk_oauth2_engine.oauth_requests import ClientCredentialsRequest, RefreshTokenRequest


class TestDumpRequest:
    """Test request dumps."""

    def test_authorization_header_redacted(self):
        request = ClientCredentialsRequest(
            authorization_url="https://example.com/token",
            client_id="client",
            client_secret="secret",
        ).authorization_request()

        dump = dump_request(request)

        assert dump.startswith("POST https://example.com/token\n")
        assert f"Authorization: {REDACTED}" in dump
        assert "grant_type=client_credentials" in dump

    def test_form_secrets_redacted(self):
        request = RefreshTokenRequest(
            token_url="https://example.com/token",
            client_id="client",
            client_secret="very-secret",
            refresh_token="refresh-value",
        ).token_request()

        dump = dump_request(request)

        assert "client_id=client" in dump
        assert "very-secret" not in dump
        assert "refresh-value" not in dump
        assert f"client_secret={REDACTED}" in dump
        assert "%3Credacted%3E" not in dump


class TestDumpResponse:
    """Test response dumps."""

    def test_status_line_and_tokens_redacted(self):
        response = RawResponse(
            status_code=200,
            headers={"Content-Type": "application/json"},
            body=json.dumps({"access_token": "T0KEN", "expires_in": 10}).encode(),
        )

        dump = dump_response(response)

        assert dump.startswith("HTTP 200 OK\n")
        assert "Content-Type: application/json" in dump
        assert "T0KEN" not in dump
        assert '"expires_in": 10' in dump

    def test_undecodable_body(self):
        response = RawResponse(
            status_code=400,
            headers={"Content-Type": "application/json"},
            body=b"\xff\xfe",
        )

        assert "<2 byte(s)>" in dump_response(response)

    def test_plain_text_body(self):
        response = RawResponse(status_code=500, body=b"Internal failure")
        dump = dump_response(response)

        assert dump.startswith("HTTP 500 Internal Server Error\n")
        assert "Internal failure" in dump


class TestRedaction:
    """Test redaction of query strings and form text."""

    def test_get_client_credentials_query_redacted(self):
        request = ClientCredentialsRequest(
            authorization_url="https://example.com/token",
            client_id="client",
            client_secret="TOPSECRET",
            use_authorization_header=False,
            method="GET",
        ).authorization_request()

        dump = dump_request(request)

        assert "TOPSECRET" not in dump
        assert f"client_secret={REDACTED}" in dump
        assert "client_id=client" in dump
        assert "grant_type=client_credentials" in dump

    def test_redact_url_keeps_other_parts(self):
        url = "https://example.com/cb?code=abc&state=x%20y#frag"
        assert redact_url(url) == f"https://example.com/cb?code={REDACTED}&state=x%20y#frag"

    def test_redact_url_without_query(self):
        assert redact_url("https://example.com/token") == "https://example.com/token"

    def test_placeholder_not_percent_encoded(self):
        assert redact_form("refresh_token=abc&scope=read+write") == (
            f"refresh_token={REDACTED}&scope=read+write"
        )
