"""Client the desktop UI uses to reach the pgprobe API.

Transport and HTTP failures are folded into a failed ``ProbeResult`` so the
UI always has a result to render.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from pydantic import ValidationError

from pgprobe.commands import COMMAND_FAILED_MESSAGE
from pgprobe.models import ConnectionSpec, ProbeResult
from pgprobe.net.http import HttpCallError, HttpClient

if TYPE_CHECKING:
    import httpx

log = logger.bind(module="ui.client")

CONNECTION_TEST_PATH = "api/v1/connections/test"
HEALTH_PATH = "api/v1/health"


class APIError(HttpCallError):
    """Raised when the API base URL is unusable."""


class ProbeAPIClient:
    """Small JSON client for the connection test endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 30.0,
        transport: "httpx.BaseTransport | None" = None,
    ) -> None:
        base_url = (base_url or "").strip()
        if not base_url:
            raise APIError("Invalid API base URL: value is empty.")
        self.base_url = base_url.rstrip("/") + "/"
        self._http = HttpClient(
            base_url=self.base_url,
            timeout_seconds=timeout_seconds,
            user_agent="pgprobe-ui",
            transport=transport,
        )

    def test_connection(self, spec: ConnectionSpec) -> ProbeResult:
        """Ask the API to probe ``spec``."""
        try:
            payload = self._http.post_json(CONNECTION_TEST_PATH, spec.model_dump(mode="json"))
            return ProbeResult.model_validate(payload)
        except (HttpCallError, ValidationError) as exc:
            log.warning("Connection test via {} failed: {}", self.base_url, exc)
            return ProbeResult.failed(COMMAND_FAILED_MESSAGE, exc)

    def is_available(self) -> bool:
        """Return True when the API answers its health check."""
        return self._http.is_reachable(HEALTH_PATH)
