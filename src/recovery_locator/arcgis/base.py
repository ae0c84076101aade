"""Shared HTTP plumbing for the ArcGIS REST clients."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from recovery_locator.core.config import ArcGISConfig

logger = logging.getLogger(__name__)


class ArcGISError(Exception):
    """An ArcGIS service answered with a JSON error envelope."""

    def __init__(self, message: str, code: int | None = None, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or []

    @classmethod
    def from_envelope(cls, envelope: dict[str, Any]) -> ArcGISError:
        return cls(
            envelope.get("message") or "ArcGIS service error",
            code=envelope.get("code"),
            details=list(envelope.get("details") or []),
        )


class ArcGISClient:
    """Base class for clients of a single ArcGIS REST endpoint.

    Holds an ``httpx.AsyncClient`` rooted at *base_url*, retries transport
    errors and 5xx responses, and unwraps ArcGIS error envelopes, which the
    services return with HTTP 200.
    """

    def __init__(
        self,
        config: ArcGISConfig,
        base_url: str,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._http = http or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
        )

    async def close(self) -> None:
        await self._http.aclose()

    # -- internal ------------------------------------------------------------

    def _params(self, **params: Any) -> dict[str, Any]:
        params["f"] = "json"
        if self.config.api_key:
            params["token"] = self.config.api_key
        return params

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Request *url* and return its JSON body.

        Raises:
            ArcGISError: For error envelopes and bodies that are not JSON objects.
            httpx.HTTPError: For transport failures and non-2xx statuses.
        """
        resp = await self._request_with_retry(method, url, **kwargs)
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as exc:
            raise ArcGISError(f"Response from {url} is not JSON") from exc
        if not isinstance(data, dict):
            raise ArcGISError(f"Unexpected response from {url}")
        if "error" in data:
            raise ArcGISError.from_envelope(data["error"] or {})
        return data

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request, retrying 5xx responses and transport errors.

        The last 5xx response is returned once attempts run out; the last
        transport error is raised.
        """
        attempts = max(1, self.config.max_retries + 1)
        attempt = 0
        while True:
            final = attempt == attempts - 1
            try:
                resp = await self._http.request(method, url, **kwargs)
            except httpx.TransportError as exc:
                if final:
                    raise
                await self._backoff(attempt, attempts, "%s on %s", type(exc).__name__, url)
                attempt += 1
                continue
            if resp.status_code < 500 or final:
                return resp
            await self._backoff(attempt, attempts, "%s returned %d", url, resp.status_code)
            attempt += 1

    @staticmethod
    async def _backoff(attempt: int, attempts: int, reason: str, *args: Any) -> None:
        delay = 0.5 * (2 ** attempt)
        logger.warning(
            reason + ", retrying in %.1fs (%d/%d)",
            *args, delay, attempt + 1, attempts,
        )
        await asyncio.sleep(delay)
