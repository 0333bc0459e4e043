"""Async REST client for the QuaiScan explorer API."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Mapping
from urllib.parse import urlencode

import aiohttp

from quaiscan_client.constants import (
    ACCOUNT_MODULE,
    BALANCE_ACTION,
    DEFAULT_OFFSET,
    DEFAULT_PAGE,
    END_BLOCK,
    START_BLOCK,
    STATUS_SOFT_ERROR,
    TXLIST_ACTION,
    default_rest_base_url,
)
from quaiscan_client.models import BalanceResponse, TrackerStats, TxListResponse
from quaiscan_client.tracker import RequestTracker

LOGGER = logging.getLogger("quaiscan.api")


class QuaiscanError(Exception):
    """Base exception for explorer client errors."""


class TransportError(QuaiscanError):
    """Raised when the API could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class QuaiscanClient:
    """Async explorer client that records every call in a ``RequestTracker``.

    Hard failures (network errors, non-2xx statuses, unreadable bodies) raise
    ``TransportError``. Envelopes with ``status == "0"`` are soft errors: they
    are logged and returned unchanged.
    """

    def __init__(
        self,
        base_url: str | None = None,
        tracker: RequestTracker | None = None,
        timeout: float | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = (base_url or default_rest_base_url()).rstrip("/")
        self.tracker = tracker if tracker is not None else RequestTracker()
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    def build_url(self, params: Mapping[str, Any]) -> str:
        if not params:
            return self.base_url
        return f"{self.base_url}?{urlencode({k: str(v) for k, v in params.items()})}"

    async def call(self, params: Mapping[str, Any]) -> Any:
        url = self.build_url(params)
        self.tracker.record_attempt(url[len(self.base_url) :])
        try:
            data = await self._send_once(url)
        except TransportError as exc:
            self.tracker.record_failure(str(exc))
            raise

        if isinstance(data, dict) and data.get("status") == STATUS_SOFT_ERROR:
            self.tracker.log(f"API Error: {data.get('message')}", is_error=True)
        return data

    async def _send_once(self, url: str) -> Any:
        session = await self._ensure_session()
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        start = time.perf_counter()
        try:
            async with session.request(
                "GET",
                url,
                headers={"Accept": "application/json"},
                timeout=timeout,
            ) as response:
                payload = await response.read()
                duration_ms = (time.perf_counter() - start) * 1000
                self.tracker.record_success(duration_ms, status=response.status)
                if not 200 <= response.status < 300:
                    raise TransportError(
                        f"HTTP Status {response.status}", status=response.status
                    )
        except aiohttp.ClientError as exc:
            raise TransportError(f"Network error while contacting API: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise TransportError("Timed out while contacting API") from exc

        try:
            return json.loads(payload.decode("utf8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise TransportError(f"Invalid JSON in API response: {exc}") from exc

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def get_balance(self, address: str) -> BalanceResponse:
        response = await self.call(
            {"module": ACCOUNT_MODULE, "action": BALANCE_ACTION, "address": address}
        )
        return BalanceResponse.model_validate(response)

    async def get_transactions(
        self, address: str, page: int = DEFAULT_PAGE, offset: int = DEFAULT_OFFSET
    ) -> TxListResponse:
        response = await self.call(
            {
                "module": ACCOUNT_MODULE,
                "action": TXLIST_ACTION,
                "address": address,
                "startblock": START_BLOCK,
                "endblock": END_BLOCK,
                "page": page,
                "offset": offset,
                "sort": "desc",
            }
        )
        return TxListResponse.model_validate(response)

    def tracker_stats(self) -> TrackerStats:
        return self.tracker.snapshot()
