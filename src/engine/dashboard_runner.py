"""Runner utilities for a headless dashboard session."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from engine.client_factory import build_client, build_coordinator
from engine.refresh_coordinator import RefreshCoordinator
from engine.state import RefreshState
from utils.config_loader import load_config
from utils.config_validator import validate_config
from utils.logging_config import setup_logging

LOGGER = logging.getLogger("quaiscan.runner")


def log_state(state: RefreshState) -> None:
    if state.loading or state.background_fetching:
        return
    LOGGER.info(
        "%d transaction(s), %d request(s), %d error(s), updated %s%s",
        len(state.transactions),
        state.stats.requests,
        state.stats.errors,
        state.last_updated_label,
        f", error: {state.error}" if state.error else "",
    )


async def run_dashboard(
    config: dict[str, Any],
    stop_event: asyncio.Event | None = None,
    coordinator: RefreshCoordinator | None = None,
) -> RefreshCoordinator:
    """Mount a coordinator, log its updates until ``stop_event`` is set, then unmount.

    The coordinator is returned so callers can inspect the final state.
    """
    client = None
    if coordinator is None:
        client = build_client(config)
        coordinator = build_coordinator(config, client=client)
    stop = stop_event or asyncio.Event()
    unsubscribe_state = coordinator.subscribe(log_state)
    unsubscribe_balance = coordinator.balance_store.subscribe(
        lambda balance: LOGGER.info("Balance: %s", balance)
    )
    coordinator.mount()
    try:
        await stop.wait()
    finally:
        unsubscribe_balance()
        unsubscribe_state()
        await coordinator.unmount()
        if client is not None:
            await coordinator.drain()
            await client.close()
    return coordinator


async def run_dashboard_from_file(
    config_path: str | Path, stop_event: asyncio.Event | None = None
) -> RefreshCoordinator:
    config = load_config(config_path)
    validate_config(config)
    setup_logging(level=str(config.get("log_level", "INFO")))
    LOGGER.info("Config file: %s", config_path)
    return await run_dashboard(config, stop_event=stop_event)
