"""Tests for the headless dashboard runner."""

from __future__ import annotations

import asyncio
import logging

import pytest
import yaml

from engine import dashboard_runner
from engine.balance_store import SharedBalanceStore
from engine.events import RefreshBus
from engine.refresh_coordinator import RefreshConfig, RefreshCoordinator
from quaiscan_client.models import BalanceResponse, TrackerStats, TxListResponse
from quaiscan_client.tracker import RequestTracker
from utils.config_validator import ConfigValidationError

ADDRESS = "0x002624Fa55DFf0ca53aF9166B4d44c16a294C4e0"


class StaticClient:
    def __init__(self) -> None:
        self.tracker = RequestTracker()

    async def get_balance(self, address: str) -> BalanceResponse:
        self.tracker.record_attempt()
        return BalanceResponse(status="1", message="OK", result="2000000000000000000")

    async def get_transactions(
        self, address: str, page: int = 1, offset: int = 10
    ) -> TxListResponse:
        self.tracker.record_attempt()
        return TxListResponse.model_validate(
            {"status": "1", "message": "OK", "result": [{"hash": "0x1"}]}
        )

    def tracker_stats(self) -> TrackerStats:
        return self.tracker.snapshot()


@pytest.mark.asyncio
async def test_run_dashboard_mounts_logs_and_unmounts(caplog) -> None:
    coordinator = RefreshCoordinator(
        StaticClient(),
        SharedBalanceStore(),
        RefreshBus(),
        RefreshConfig(address=ADDRESS, poll_interval_sec=3600, label_interval_sec=3600),
    )
    stop = asyncio.Event()
    settled = asyncio.Event()
    coordinator.subscribe(lambda state: settled.set() if state.transactions else None)

    with caplog.at_level(logging.INFO, logger="quaiscan.runner"):
        runner = asyncio.create_task(
            dashboard_runner.run_dashboard(
                {"address": ADDRESS}, stop_event=stop, coordinator=coordinator
            )
        )
        await asyncio.wait_for(settled.wait(), timeout=2)
        stop.set()
        result = await runner

    assert result is coordinator
    assert coordinator.mounted is False
    assert coordinator.balance_store.get() == "2.0000 QUAI"
    assert coordinator.refresh_bus.subscriber_count == 0
    messages = [record.getMessage() for record in caplog.records]
    assert "Balance: 2.0000 QUAI" in messages
    assert any(message.startswith("1 transaction(s), 2 request(s)") for message in messages)


@pytest.mark.asyncio
async def test_run_dashboard_from_file_validates_config(tmp_path) -> None:
    config_file = tmp_path / "dashboard.yml"
    with open(config_file, "w") as f:
        yaml.dump({"address": "not-an-address"}, f)

    with pytest.raises(ConfigValidationError):
        await dashboard_runner.run_dashboard_from_file(config_file)


@pytest.mark.asyncio
async def test_run_dashboard_from_file_requires_existing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        await dashboard_runner.run_dashboard_from_file(tmp_path / "missing.yml")
