"""
Centralized construction of the explorer client and refresh coordinator.

The runner and tests build sessions through these helpers so configuration
keys are interpreted in one place.
"""

from __future__ import annotations

from typing import Any

from engine.balance_store import SharedBalanceStore
from engine.events import RefreshBus
from engine.refresh_coordinator import RefreshConfig, RefreshCoordinator
from quaiscan_client.async_rest import QuaiscanClient
from quaiscan_client.constants import DEFAULT_OFFSET, DEFAULT_PAGE, default_rest_base_url
from quaiscan_client.tracker import RequestTracker


def build_client(
    config: dict[str, Any], tracker: RequestTracker | None = None
) -> QuaiscanClient:
    """
    Build the explorer client from config.

    Args:
        config: Configuration dict containing:
            - base_url: str (default: "https://quaiscan.io/api")
            - request_timeout_sec: float (optional) - Client-side timeout,
              disabled when absent
        tracker: Optional tracker to share with other components

    Returns:
        QuaiscanClient: Client recording every call in ``tracker``
    """
    base_url = config.get("base_url", default_rest_base_url())
    timeout = config.get("request_timeout_sec")
    return QuaiscanClient(
        base_url=base_url,
        tracker=tracker,
        timeout=float(timeout) if timeout is not None else None,
    )


def build_refresh_config(config: dict[str, Any]) -> RefreshConfig:
    return RefreshConfig(
        address=str(config["address"]),
        poll_interval_sec=float(config.get("poll_interval_sec", 15.0)),
        label_interval_sec=float(config.get("label_interval_sec", 1.0)),
        page=int(config.get("page", DEFAULT_PAGE)),
        offset=int(config.get("offset", DEFAULT_OFFSET)),
    )


def build_coordinator(
    config: dict[str, Any],
    client: QuaiscanClient | None = None,
    balance_store: SharedBalanceStore | None = None,
    refresh_bus: RefreshBus | None = None,
) -> RefreshCoordinator:
    """
    Build a coordinator with its collaborators.

    Missing collaborators are created fresh, so every call yields an
    isolated session unless shared instances are passed in.

    Example:
        >>> coordinator = build_coordinator({"address": "0x00..."})
        >>> coordinator.refresh_bus.publish()
    """
    return RefreshCoordinator(
        client if client is not None else build_client(config),
        balance_store if balance_store is not None else SharedBalanceStore(),
        refresh_bus if refresh_bus is not None else RefreshBus(),
        build_refresh_config(config),
    )
