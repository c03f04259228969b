# chuk_oauth2_engine/response_decoder.py
"""Classification and decoding of token endpoint responses."""

import json
import logging
from typing import Any, Dict, Optional

from .encoding import parse_content_type, parse_form_data, parse_json
from .errors import (
    AuthorizationFailure,
    EmptyResponseBody,
    InvalidTextEncoding,
    MalformedJSON,
    MissingHTTPResponse,
    NotAJSONObject,
    TransportError,
    UnexpectedServerResponse,
)
from .oauth_models import (
    AuthorizationData,
    ErrorData,
    Failure,
    RawResponse,
    Response,
    Success,
)

logger = logging.getLogger(__name__)

JSON_MIME_TYPES = frozenset({"application/json", "text/json", "text/x-json"})
DEFAULT_CONTENT_TYPE = "application/octet-stream"

STATUS_SUCCESS = 200
STATUS_OAUTH_ERROR = 400


def decode_payload(response: RawResponse) -> Dict[str, Any]:
    """
    Decode a response body into a field mapping.

    The body is decoded with the charset from ``Content-Type``. JSON MIME
    types are parsed as JSON; anything else is parsed as URL-encoded form
    data, since some servers send form-encoded or plain text bodies.

    Args:
        response: Raw HTTP response

    Returns:
        Decoded fields

    Raises:
        DecodeError: If the body is empty, cannot be decoded as text, or
            is not a JSON object
    """
    content_type = response.header("Content-Type") or DEFAULT_CONTENT_TYPE
    mime_type, charset = parse_content_type(content_type)

    if not response.body:
        raise EmptyResponseBody()

    try:
        text = response.body.decode(charset)
    except UnicodeDecodeError as e:
        raise InvalidTextEncoding(charset, e) from e

    if mime_type not in JSON_MIME_TYPES:
        return parse_form_data(text)

    try:
        payload = parse_json(text)
    except json.JSONDecodeError as e:
        raise MalformedJSON(e) from e
    except RecursionError as e:
        raise MalformedJSON(ValueError("JSON nesting is too deep")) from e
    if not isinstance(payload, dict):
        raise NotAJSONObject(type(payload).__name__)
    return payload


def decode_response(
    response: Optional[RawResponse], error: Optional[BaseException] = None
) -> Response:
    """
    Turn a transport outcome into a flow result.

    Only 200 (tokens) and 400 (RFC 6749 error) bodies are parsed; any other
    status is reported as UnexpectedServerResponse with the raw response
    attached.

    Args:
        response: Raw HTTP response, or None if none was received
        error: Transport error, if the request failed

    Returns:
        Success with the decoded tokens, or Failure
    """
    if error is not None:
        return Failure(TransportError(error))
    if response is None:
        return Failure(MissingHTTPResponse())

    if response.status_code not in (STATUS_SUCCESS, STATUS_OAUTH_ERROR):
        logger.warning(f"Unexpected HTTP {response.status_code} from token endpoint")
        return Failure(UnexpectedServerResponse(response))

    try:
        payload = decode_payload(response)
        if response.status_code == STATUS_OAUTH_ERROR:
            return Failure(ErrorData.from_payload(payload).as_authorization_failure())
        return Success(AuthorizationData.from_payload(payload))
    except AuthorizationFailure as failure:
        return Failure(failure)
