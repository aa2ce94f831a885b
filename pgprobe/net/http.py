"""Shared HTTP helpers built on top of httpx.

Call sites get the same timeout and redirect defaults, and httpx exceptions
are mapped into ``HttpCallError`` so callers only handle one error type.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

import httpx

__all__ = ["HttpCallError", "HttpClient"]

_MIN_TIMEOUT_SECONDS = 0.1
_MAX_ERROR_TEXT_CHARS = 2048


class HttpCallError(RuntimeError):
    """Raised when an HTTP request fails or returns a non-success response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = str(message)
        self.status_code = int(status_code) if status_code is not None else None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.status_code is None:
            return self.message
        return f"{self.message} (status={self.status_code})"


def _truncate(text: str, *, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[: max(0, limit - 3)].rstrip()}..."


def _safe_response_text(response: httpx.Response) -> str:
    """Best-effort, trimmed response body for error messages."""
    try:
        text = (response.text or "").strip()
    except Exception:
        text = response.content.decode("utf-8", errors="replace").strip()
    return _truncate(text, limit=_MAX_ERROR_TEXT_CHARS)


class HttpClient:
    """Small sync HTTP client with consistent defaults and error mapping.

    A short-lived `httpx.Client` is created per request; timeouts are clamped
    to at least `_MIN_TIMEOUT_SECONDS`.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_seconds: float = 10.0,
        user_agent: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/") + "/" if base_url else None
        self.timeout_seconds = float(max(_MIN_TIMEOUT_SECONDS, timeout_seconds))
        self.headers: dict[str, str] = {"User-Agent": user_agent} if user_agent else {}
        self.transport = transport

    def _build_client(self) -> httpx.Client:
        kwargs: dict[str, object] = {
            "timeout": self.timeout_seconds,
            "follow_redirects": True,
            "headers": self.headers,
        }
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.Client(**kwargs)  # type: ignore[arg-type]

    def request(
        self,
        method: str,
        url_or_path: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: Any | None = None,
    ) -> httpx.Response:
        """Send an HTTP request and return the response.

        Raises:
            HttpCallError: When the request fails or returns a 4xx/5xx response.
        """
        method = (method or "GET").strip().upper()
        target = (url_or_path or "").strip()
        if not target:
            raise ValueError("url_or_path must be non-empty.")

        try:
            with self._build_client() as client:
                response = client.request(
                    method,
                    target,
                    headers=dict(headers) if headers else None,
                    json=json_body,
                )
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as exc:
            message = _safe_response_text(exc.response) or "HTTP request failed"
            raise HttpCallError(message, status_code=int(exc.response.status_code)) from exc
        except httpx.RequestError as exc:
            raise HttpCallError(f"HTTP request failed: {exc}") from exc

    def post_json(self, url_or_path: str, payload: Any) -> Any:
        """POST a JSON body and return the parsed JSON response."""
        response = self.request(
            "POST",
            url_or_path,
            headers={"Accept": "application/json"},
            json_body=payload,
        )
        try:
            return json.loads(response.content.decode("utf-8", errors="replace"))
        except json.JSONDecodeError as exc:
            raise HttpCallError(
                f"Invalid JSON response: {exc}",
                status_code=int(response.status_code),
            ) from exc

    def is_reachable(self, url_or_path: str) -> bool:
        """Return True when a GET request returns a 2xx response."""
        try:
            self.request("GET", url_or_path)
        except (HttpCallError, ValueError):
            return False
        return True
