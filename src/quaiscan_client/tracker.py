"""Request telemetry for the explorer API client."""

from __future__ import annotations

import logging
import time
from collections import deque
from datetime import datetime, timezone
from typing import Callable

from quaiscan_client.models import TrackerStats

LOGGER = logging.getLogger("quaiscan.api")

MAX_LOG_ENTRIES = 100


class RequestTracker:
    """
    Counts attempted and failed API calls and keeps a bounded event log.

    The log buffer holds the most recent ``max_logs`` lines; older lines are
    dropped first. Each line is mirrored to the ``quaiscan.api`` logger.

    Example:
        tracker = RequestTracker()
        tracker.record_attempt("?module=account&action=balance")
        tracker.record_success(42.0, status=200)
        tracker.snapshot().requests  # 1
    """

    def __init__(
        self,
        max_logs: int = MAX_LOG_ENTRIES,
        time_provider: Callable[[], float] | None = None,
    ) -> None:
        self._time_provider = time_provider or time.time
        self._requests = 0
        self._errors = 0
        self._last_request_time: float | None = None
        self._logs: deque[str] = deque(maxlen=max_logs)

    @property
    def requests(self) -> int:
        return self._requests

    @property
    def errors(self) -> int:
        return self._errors

    def record_attempt(self, description: str | None = None) -> None:
        self._requests += 1
        self._last_request_time = self._time_provider()
        if description is not None:
            self.log(f"REQ -> {description}")

    def record_success(self, duration_ms: float, status: int = 200) -> None:
        self.log(f"RES <- {status} ({duration_ms:.0f}ms)")

    def record_failure(self, message: str) -> None:
        self._errors += 1
        self.log(f"ERR !! {message}", is_error=True)

    def log(self, message: str, is_error: bool = False) -> None:
        timestamp = datetime.fromtimestamp(
            self._time_provider(), tz=timezone.utc
        ).isoformat(timespec="milliseconds")
        line = f"[API {timestamp}] {message}"
        if is_error:
            LOGGER.error(line)
        else:
            LOGGER.info(line)
        self._logs.append(line)

    def snapshot(self) -> TrackerStats:
        """Return a detached copy of the current counters and log."""
        return TrackerStats(
            requests=self._requests,
            errors=self._errors,
            last_request_time=self._last_request_time,
            logs=tuple(self._logs),
        )
