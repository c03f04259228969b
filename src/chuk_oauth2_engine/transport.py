# chuk_oauth2_engine/transport.py
"""Transport contract and the default httpx implementation."""

import logging
from typing import Optional, Protocol

import httpx

from .config import EngineConfig
from .oauth_models import RawResponse
from .oauth_requests import HttpRequest

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Sends an HTTP request and returns the raw response."""

    async def send(self, request: HttpRequest) -> RawResponse:
        """
        Send a request.

        Raises:
            Exception: Any transport failure (connection, timeout, ...)
        """
        ...


def raw_response_from_httpx(response: httpx.Response) -> RawResponse:
    """Convert an ``httpx.Response`` whose body has been read."""
    return RawResponse(
        status_code=response.status_code,
        headers=dict(response.headers),
        body=response.content,
        url=str(response.url),
    )


class HttpxTransport:
    """Transport backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[EngineConfig] = None,
    ):
        """
        Initialize the transport.

        Args:
            client: Client to reuse (default: a new client per request,
                built from ``config``)
            config: Engine configuration supplying client options
        """
        self.client = client
        self.config = config or EngineConfig()

    async def send(self, request: HttpRequest) -> RawResponse:
        if self.client is not None:
            response = await self.client.send(request.to_httpx())
            return raw_response_from_httpx(response)

        async with httpx.AsyncClient(**self.config.httpx_client_kwargs()) as client:
            response = await client.send(request.to_httpx())
            return raw_response_from_httpx(response)
