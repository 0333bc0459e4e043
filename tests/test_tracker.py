"""Tests for request telemetry tracking."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from quaiscan_client.tracker import RequestTracker


def test_tracker_counts_attempts_and_failures() -> None:
    tracker = RequestTracker(time_provider=lambda: 1700000000.0)

    for index in range(5):
        tracker.record_attempt()
        if index % 2:
            tracker.record_failure("HTTP Status 500")
        else:
            tracker.record_success(12.0)

    stats = tracker.snapshot()
    assert stats.requests == 5
    assert stats.errors == 2
    assert stats.last_request_time == 1700000000.0


def test_tracker_starts_empty() -> None:
    stats = RequestTracker().snapshot()

    assert stats.requests == 0
    assert stats.errors == 0
    assert stats.last_request_time is None
    assert stats.logs == ()


def test_tracker_log_lines_are_prefixed_with_timestamp() -> None:
    tracker = RequestTracker(time_provider=lambda: 0.0)

    tracker.record_attempt("?module=account&action=balance")
    tracker.record_success(41.6, status=200)
    tracker.record_failure("boom")

    assert tracker.snapshot().logs == (
        "[API 1970-01-01T00:00:00.000+00:00] REQ -> ?module=account&action=balance",
        "[API 1970-01-01T00:00:00.000+00:00] RES <- 200 (42ms)",
        "[API 1970-01-01T00:00:00.000+00:00] ERR !! boom",
    )


def test_tracker_log_buffer_keeps_most_recent_hundred() -> None:
    tracker = RequestTracker(time_provider=lambda: 0.0)

    for index in range(150):
        tracker.log(f"event {index}")

    logs = tracker.snapshot().logs
    assert len(logs) == 100
    assert logs[0].endswith("event 50")
    assert logs[-1].endswith("event 149")


def test_tracker_snapshot_is_detached() -> None:
    tracker = RequestTracker()
    tracker.record_attempt()
    before = tracker.snapshot()

    tracker.record_attempt()
    tracker.record_failure("late")

    assert before.requests == 1
    assert before.errors == 0
    assert len(before.logs) == 0
    with pytest.raises(ValidationError):
        before.requests = 10  # type: ignore[misc]


def test_tracker_mirrors_lines_to_logger(caplog: pytest.LogCaptureFixture) -> None:
    tracker = RequestTracker(time_provider=lambda: 0.0)

    with caplog.at_level(logging.INFO, logger="quaiscan.api"):
        tracker.log("fine")
        tracker.log("bad", is_error=True)

    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.INFO, logging.ERROR]
    assert caplog.records[1].getMessage().endswith("bad")
