# chuk_oauth2_engine/user_agent.py
"""User-agent contract and a browser + loopback-server implementation.

A user-agent loads the authorization page for the resource owner and
watches for navigation to the client's redirect URL. Instead of following
that navigation it reports the full target URL back to the flow.
"""

import asyncio
import logging
import threading
import time
import webbrowser
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Dict, Optional, Protocol, Set, Union
from urllib.parse import urlsplit

from .errors import UserCanceled
from .oauth_models import RawResponse
from .oauth_requests import HttpRequest

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1"})

CALLBACK_PAGE = (
    b"<!DOCTYPE html><html><head><title>Authorization complete</title></head>"
    b"<body><p>Authorization complete. You can close this window.</p></body></html>"
)


@dataclass(frozen=True)
class Redirected:
    """The authorization page redirected to the watched URL."""

    url: str


@dataclass(frozen=True)
class ResponseError:
    """The authorization page itself answered with a non-2xx status."""

    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    url: Optional[str] = None

    def to_raw_response(self) -> RawResponse:
        return RawResponse(
            status_code=self.status_code, headers=dict(self.headers), url=self.url
        )


@dataclass(frozen=True)
class LoadError:
    """The authorization page could not be loaded, or the user gave up."""

    error: BaseException


UserAgentResult = Union[Redirected, ResponseError, LoadError]


class UserAgent(Protocol):
    """Presents the authorization page and captures the redirect."""

    async def present(
        self, request: HttpRequest, watch_prefix: str
    ) -> UserAgentResult:
        """
        Load ``request`` and wait for navigation to ``watch_prefix``.

        Args:
            request: Authorization-step request to load
            watch_prefix: URL prefix whose navigation must be intercepted

        Returns:
            Redirected, ResponseError or LoadError
        """
        ...


def matches_watch_prefix(url: str, watch_prefix: str) -> bool:
    """Whether a navigation target should be intercepted (case-insensitive)."""
    return url.lower().startswith(watch_prefix.lower())


class _CallbackHandler(BaseHTTPRequestHandler):
    server: "_CallbackServer"

    def do_GET(self) -> None:
        target = f"{self.server.base_url}{self.path}"
        if not matches_watch_prefix(target, self.server.watch_prefix):
            self.send_error(404)
            return

        self.server.redirect_url = target
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(CALLBACK_PAGE)))
        self.end_headers()
        self.wfile.write(CALLBACK_PAGE)

    def log_message(self, format: str, *args) -> None:
        logger.debug(f"Callback server: {format % args}")


class _CallbackServer(HTTPServer):
    def __init__(self, address, base_url: str, watch_prefix: str):
        super().__init__(address, _CallbackHandler)
        self.base_url = base_url
        self.watch_prefix = watch_prefix
        self.redirect_url: Optional[str] = None


class LoopbackBrowserUserAgent:
    """
    Opens the authorization page in the system browser and captures the
    redirect with a one-shot HTTP server bound to the redirect URL.

    Only ``http://localhost`` and ``http://127.0.0.1`` redirect URLs can
    be served. Each call to :meth:`present` waits independently, so one
    instance can serve concurrent flows. Call :meth:`cancel` from another
    thread or task to give up the waits in progress; those flows then fail
    with UserCanceled, while later calls are unaffected.
    """

    def __init__(self, timeout: float = 300.0, open_browser: bool = True):
        """
        Initialize the user-agent.

        Args:
            timeout: Seconds to wait for the redirect
            open_browser: Open the system browser (otherwise only log the URL)
        """
        self.timeout = timeout
        self.open_browser = open_browser
        self._lock = threading.Lock()
        self._waiting: Set[threading.Event] = set()

    def cancel(self) -> None:
        """Stop every wait currently in progress on this user-agent."""
        with self._lock:
            for canceled in self._waiting:
                canceled.set()

    async def present(
        self, request: HttpRequest, watch_prefix: str
    ) -> UserAgentResult:
        if request.method != "GET":
            return LoadError(
                ValueError(f"Cannot open a {request.method} request in a browser")
            )

        parts = urlsplit(watch_prefix)
        if parts.scheme != "http" or parts.hostname not in LOOPBACK_HOSTS:
            return LoadError(
                ValueError(f"Redirect URL is not a loopback http URL: {watch_prefix}")
            )

        try:
            server = _CallbackServer(
                (parts.hostname, parts.port or 80),
                f"{parts.scheme}://{parts.netloc}",
                watch_prefix,
            )
        except OSError as e:
            return LoadError(e)

        canceled = threading.Event()
        with self._lock:
            self._waiting.add(canceled)
        try:
            logger.info(f"Open this URL to authorize: {request.url}")
            if self.open_browser and not webbrowser.open(request.url):
                logger.warning("Could not open a browser; open the URL manually")
            return await asyncio.to_thread(self._wait_for_redirect, server, canceled)
        finally:
            with self._lock:
                self._waiting.discard(canceled)
            server.server_close()

    def _wait_for_redirect(
        self, server: _CallbackServer, canceled: threading.Event
    ) -> UserAgentResult:
        server.timeout = 0.25
        deadline = time.monotonic() + self.timeout
        while server.redirect_url is None:
            if canceled.is_set():
                return LoadError(UserCanceled())
            if time.monotonic() >= deadline:
                return LoadError(
                    TimeoutError(
                        f"No redirect received within {self.timeout:g} seconds"
                    )
                )
            server.handle_request()
        return Redirected(server.redirect_url)
