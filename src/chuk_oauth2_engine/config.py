# chuk_oauth2_engine/config.py
"""Engine configuration."""

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

_TRUE_VALUES = {"1", "true", "yes", "on"}


class EngineConfig(BaseModel):
    """
    Settings consumed by the flow engine and the default transport.

    ``log_http`` only controls request/response dumps in the logs; it never
    changes how responses are decoded. ``timeout`` and ``client_options``
    are passed straight through to ``httpx.AsyncClient``.
    """

    log_http: bool = False
    timeout: float = 30.0
    client_options: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """
        Build configuration from environment variables.

        Reads ``CHUK_OAUTH2_LOG_HTTP`` and ``CHUK_OAUTH2_TIMEOUT``.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            EngineConfig instance
        """
        if environ is None:
            environ = os.environ

        values: Dict[str, Any] = {}
        log_http = environ.get("CHUK_OAUTH2_LOG_HTTP")
        if log_http is not None:
            values["log_http"] = log_http.strip().lower() in _TRUE_VALUES
        timeout = environ.get("CHUK_OAUTH2_TIMEOUT")
        if timeout:
            values["timeout"] = float(timeout)
        return cls(**values)

    def httpx_client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for constructing an ``httpx.AsyncClient``."""
        kwargs: Dict[str, Any] = {"timeout": self.timeout}
        kwargs.update(self.client_options)
        return kwargs
