# chuk_oauth2_engine/http_logging.py
"""Human-readable dumps of requests and responses for verbose logging."""

import json
from typing import Dict, Mapping
from urllib.parse import urlsplit, urlunsplit

import httpx

from .encoding import parse_content_type, url_decode
from .oauth_models import RawResponse
from .oauth_requests import HttpRequest

REDACTED = "<redacted>"

SENSITIVE_FIELDS = frozenset(
    {"client_secret", "access_token", "refresh_token", "code", "id_token"}
)
SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})


def _redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    return {
        name: REDACTED if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def _redact_fields(fields: Mapping[str, object]) -> Dict[str, object]:
    return {
        name: REDACTED if name in SENSITIVE_FIELDS else value
        for name, value in fields.items()
    }


def redact_form(text: str) -> str:
    """
    Replace sensitive values in ``name=value&...`` text.

    Other fields are kept exactly as written; the placeholder is not
    percent-encoded.
    """
    fields = []
    for field in text.split("&"):
        name, separator, _ = field.partition("=")
        if separator and url_decode(name) in SENSITIVE_FIELDS:
            field = f"{name}={REDACTED}"
        fields.append(field)
    return "&".join(fields)


def redact_url(url: str) -> str:
    """Return ``url`` with sensitive query parameters redacted."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    return urlunsplit(parts._replace(query=redact_form(parts.query)))


def _format_body(body: bytes, content_type: str) -> str:
    mime_type, charset = parse_content_type(content_type)
    try:
        text = body.decode(charset)
    except UnicodeDecodeError:
        return f"<{len(body)} byte(s)>"

    if "json" in mime_type:
        try:
            payload = json.loads(text)
        except (ValueError, RecursionError):
            return text
        if isinstance(payload, dict):
            return json.dumps(_redact_fields(payload))
        return text

    return redact_form(text)


def _format_headers(headers: Mapping[str, str]) -> str:
    return "".join(
        f"{name}: {value}\n" for name, value in _redact_headers(headers).items()
    )


def dump_request(request: HttpRequest) -> str:
    """Render a request with credentials redacted."""
    result = f"{request.method} {redact_url(request.url)}\n"
    result += _format_headers(request.headers)
    if request.body:
        content_type = next(
            (v for k, v in request.headers.items() if k.lower() == "content-type"),
            "application/octet-stream",
        )
        result += f"\n{_format_body(request.body, content_type)}\n"
    return result


def dump_response(response: RawResponse) -> str:
    """Render a response with tokens redacted."""
    reason = httpx.codes.get_reason_phrase(response.status_code)
    result = f"HTTP {response.status_code} {reason}\n"
    result += _format_headers(response.headers)
    if response.body:
        content_type = response.header("Content-Type") or "application/octet-stream"
        result += f"\n{_format_body(response.body, content_type)}\n"
    return result
