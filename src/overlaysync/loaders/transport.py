"""httpx async transport that retries transient resource fetch failures."""

from __future__ import annotations

import asyncio
import logging
import random

import httpx

_LOG = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


class RetryingTransport(httpx.AsyncBaseTransport):
    """Retries 429/502/503/504 responses and transport errors with backoff.

    A ``Retry-After`` header on a retryable response is honoured before the
    exponential backoff. After *max_retries* retries the last response is
    returned (or the last transport error re-raised) for the caller to handle.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        backoff_cap: float = 4.0,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._backoff_cap = backoff_cap

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as exc:
                if attempt >= self._max_retries:
                    raise
                _LOG.warning("Resource fetch %s failed (%s), retrying", request.url, exc.__class__.__name__)
                await self._sleep_backoff(attempt)
                attempt += 1
                continue

            if response.status_code not in _RETRYABLE_STATUS_CODES or attempt >= self._max_retries:
                return response

            _LOG.warning("Resource fetch %s returned %d, retrying", request.url, response.status_code)
            await response.aclose()
            retry_after = self._parse_retry_after(response)
            if retry_after > 0:
                await asyncio.sleep(retry_after)
            await self._sleep_backoff(attempt)
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> float:
        raw = response.headers.get("Retry-After")
        if raw is None:
            return 0.0
        try:
            return max(0.0, float(raw))
        except ValueError:
            return 0.0

    async def _sleep_backoff(self, attempt: int) -> None:
        seconds = min(self._backoff_cap, self._backoff_base * 2**attempt)
        seconds += random.uniform(0.0, 0.25 * self._backoff_base)
        await asyncio.sleep(seconds)
