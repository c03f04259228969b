# chuk_oauth2_engine/oauth_flow.py
"""OAuth 2.0 grant flows."""

import logging
from enum import Enum
from typing import Callable, Optional

from .config import EngineConfig
from .encoding import query_parameters
from .errors import (
    AuthorizationFailure,
    MissingParametersInRedirectionURI,
    TransportError,
    UnexpectedServerResponse,
)
from .http_logging import dump_request, dump_response, redact_url
from .oauth_models import ErrorData, Failure, RawResponse, Response
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

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[Response], None]


class FlowState(Enum):
    """States of the authorization code flow."""

    AWAITING_REDIRECT = "awaiting_redirect"
    EXCHANGING_CODE = "exchanging_code"


class OAuth2Flow:
    """
    Runs OAuth 2.0 grant flows against injected collaborators.

    Each flow method returns exactly one Response and, if a completion
    handler is given, calls it exactly once with that same Response.
    Failures are returned, not raised. The instance holds no per-flow
    state, so flows may run concurrently.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        user_agent: Optional[UserAgent] = None,
        config: Optional[EngineConfig] = None,
    ):
        """
        Initialize the flow engine.

        Args:
            transport: Transport for token requests (default: HttpxTransport)
            user_agent: User-agent for the authorization step
                (default: LoopbackBrowserUserAgent)
            config: Engine configuration
        """
        self.config = config or EngineConfig()
        self.transport: Transport = transport or HttpxTransport(config=self.config)
        self.user_agent: UserAgent = user_agent or LoopbackBrowserUserAgent()

    async def authorize_code(
        self,
        request: AuthorizationCodeRequest,
        completion: Optional[CompletionHandler] = None,
    ) -> Response:
        """
        Perform an ``authorization_code`` flow.

        The authorization page is presented through the user-agent; when it
        redirects to ``request.redirect_url`` with a code, the code is
        exchanged for tokens.

        Args:
            request: The authorization code request
            completion: Optional handler called once with the result

        Returns:
            Success or Failure
        """
        response = await self._authorization_code_flow(request)
        return self._complete(response, completion)

    async def authorize_client_credentials(
        self,
        request: ClientCredentialsRequest,
        completion: Optional[CompletionHandler] = None,
    ) -> Response:
        """Perform a ``client_credentials`` flow. No user interaction."""
        response = await self._send_and_decode(request.authorization_request())
        return self._complete(response, completion)

    async def refresh(
        self,
        request: RefreshTokenRequest,
        completion: Optional[CompletionHandler] = None,
    ) -> Response:
        """Perform a ``refresh_token`` flow. No user interaction."""
        response = await self._send_and_decode(request.token_request())
        return self._complete(response, completion)

    async def _authorization_code_flow(
        self, request: AuthorizationCodeRequest
    ) -> Response:
        state = FlowState.AWAITING_REDIRECT
        authorization_request = request.authorization_request()
        self._log_request(authorization_request)
        logger.debug(f"{state.value}: presenting {request.authorization_url}")

        try:
            result = await self.user_agent.present(
                authorization_request, request.redirect_url
            )
        except Exception as e:
            logger.warning(f"User-agent failed during authorization: {e}")
            return Failure(TransportError(e))

        if isinstance(result, LoadError):
            if isinstance(result.error, AuthorizationFailure):
                return Failure(result.error)
            logger.warning(f"Authorization page failed to load: {result.error}")
            return Failure(TransportError(result.error))

        if isinstance(result, ResponseError):
            raw = result.to_raw_response()
            self._log_response(raw)
            logger.warning(f"Authorization page returned HTTP {result.status_code}")
            return Failure(UnexpectedServerResponse(raw))

        if not isinstance(result, Redirected):
            return Failure(
                TransportError(TypeError(f"Unsupported user-agent result: {result!r}"))
            )

        parameters = query_parameters(result.url)
        code = parameters.get("code")
        if code:
            state = FlowState.EXCHANGING_CODE
            logger.debug(f"{state.value}: redirect carried an authorization code")
            return await self._send_and_decode(request.token_request(code))

        error = parameters.get("error")
        if error:
            error_data = ErrorData(
                error=error,
                error_description=parameters.get("error_description"),
                error_uri=parameters.get("error_uri"),
            )
            logger.warning(f"Authorization denied by server: {error}")
            return Failure(error_data.as_authorization_failure())

        return Failure(MissingParametersInRedirectionURI(result.url))

    async def _send_and_decode(self, request: HttpRequest) -> Response:
        self._log_request(request)
        try:
            raw = await self.transport.send(request)
        except Exception as e:
            logger.warning(f"Request to {redact_url(request.url)} failed: {e}")
            return decode_response(None, e)

        if raw is not None:
            self._log_response(raw)
        return decode_response(raw)

    def _complete(
        self, response: Response, completion: Optional[CompletionHandler]
    ) -> Response:
        if isinstance(response, Failure):
            logger.info(f"Authorization failed: {response.failure}")
        else:
            logger.info("Authorization succeeded")
        if completion is not None:
            completion(response)
        return response

    def _log_request(self, request: HttpRequest) -> None:
        if self.config.log_http:
            logger.info(dump_request(request))

    def _log_response(self, response: RawResponse) -> None:
        if self.config.log_http:
            logger.info(dump_response(response))
