# chuk_oauth2_engine/encoding.py
"""Encoding helpers shared by request construction and response decoding."""

import base64
import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, quote, unquote_plus, urlsplit

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"

# Charset names servers are known to send, mapped to Python codec names.
# Anything not listed falls back to UTF-8.
_CHARSETS: Dict[str, str] = {
    "iso-8859-1": "iso-8859-1",
    "latin1": "iso-8859-1",
    "iso-8859-2": "iso-8859-2",
    "latin2": "iso-8859-2",
    "iso-2022-jp": "iso2022_jp",
    "shift_jis": "shift_jis",
    "us-ascii": "ascii",
    "utf-8": "utf-8",
    "utf-16": "utf-16",
    "utf-16be": "utf-16-be",
    "utf-16le": "utf-16-le",
    "utf-32": "utf-32",
    "utf-32be": "utf-32-be",
    "utf-32le": "utf-32-le",
    "windows-1250": "cp1250",
    "windows-1251": "cp1251",
    "windows-1252": "cp1252",
    "windows-1253": "cp1253",
    "windows-1254": "cp1254",
    "x-mac-roman": "mac_roman",
}


def url_encode(value: Any) -> Optional[str]:
    """
    Percent-encode a value for use in a query string or form body.

    Only RFC 3986 unreserved characters are left as-is, so ``&``, ``=``,
    ``+`` and spaces are always escaped.

    Args:
        value: Value to encode

    Returns:
        Encoded string, or None if the value cannot be encoded
    """
    if not isinstance(value, str):
        return None
    try:
        return quote(value, safe="")
    except UnicodeEncodeError:
        return None


def url_decode(value: str) -> str:
    """Decode a percent-encoded value, treating ``+`` as a space."""
    return unquote_plus(value)


def encode_form(parameters: Mapping[str, Optional[str]]) -> str:
    """
    Encode parameters as ``application/x-www-form-urlencoded`` text.

    None values are skipped. A value that cannot be percent-encoded is
    dropped from the output rather than failing the whole request.

    Args:
        parameters: Parameter names and values, in output order

    Returns:
        Encoded form string (``name=value&name=value``)
    """
    fields = []
    for name, value in parameters.items():
        if value is None:
            continue
        encoded_name = url_encode(name)
        encoded_value = url_encode(value)
        if encoded_name is None or encoded_value is None:
            logger.debug(f"Dropping parameter {name!r}: value cannot be percent-encoded")
            continue
        fields.append(f"{encoded_name}={encoded_value}")
    return "&".join(fields)


def parse_form_data(text: str) -> Dict[str, str]:
    """
    Parse URL-encoded form data into a dictionary.

    Fields without an ``=`` are ignored; names and values are decoded.
    """
    fields: Dict[str, str] = {}
    for field in text.strip().split("&"):
        name, separator, value = field.partition("=")
        if not separator or not name:
            continue
        fields[url_decode(name)] = url_decode(value)
    return fields


def append_query(url: str, query: str) -> str:
    """Append an encoded query string to a URL that may already carry one."""
    if not query:
        return url
    separator = "&" if urlsplit(url).query else "?"
    return f"{url}{separator}{query}"


def query_parameters(url: str) -> Dict[str, str]:
    """
    Extract the query parameters of a URL.

    Parameters with empty values are omitted; for repeated names the last
    value wins.
    """
    return dict(parse_qsl(urlsplit(url).query))


def base64_encode(value: str) -> str:
    """Base64-encode the UTF-8 bytes of a string."""
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def basic_authorization(client_id: str, client_secret: str) -> str:
    """Build an HTTP Basic ``Authorization`` header value."""
    return f"Basic {base64_encode(f'{client_id}:{client_secret}')}"


def resolve_charset(name: Optional[str]) -> str:
    """Map a ``charset`` parameter to a Python codec name, defaulting to UTF-8."""
    if not name:
        return DEFAULT_CHARSET
    return _CHARSETS.get(name.strip().strip('"').lower(), DEFAULT_CHARSET)


def parse_content_type(header: str) -> Tuple[str, str]:
    """
    Parse an HTTP ``Content-Type`` header.

    The RFC default charset is ISO-8859-1, but servers rarely honour that,
    so UTF-8 is assumed when no usable charset is declared.

    Args:
        header: Header value, e.g. ``application/json; charset=utf-8``

    Returns:
        Tuple of (lower-cased MIME type, Python codec name)
    """
    mime_type, *parameters = [part.strip() for part in header.split(";")]
    charset = None
    for parameter in parameters:
        name, separator, value = parameter.partition("=")
        if separator and name.strip().lower() == "charset":
            charset = value
    return mime_type.lower(), resolve_charset(charset)


def parse_json(text: str) -> Any:
    """
    Parse JSON text.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON
        RecursionError: If the text nests deeper than the interpreter allows
    """
    return json.loads(text)
