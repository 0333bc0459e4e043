"""Refresh coordination for the wallet dashboard.

The coordinator owns the polling timer, the manual-refresh subscription and
the last-updated label timer. Fetches come in two kinds:

* foreground: triggered on mount or by a ``RefreshBus`` publish; sets
  ``loading`` and surfaces failures through ``RefreshState.error``.
* background: triggered by the poll timer; sets ``background_fetching`` and
  only logs failures.

Every fetch requests the balance and the transaction list concurrently and
settles once both calls have finished.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from engine.balance_store import SharedBalanceStore
from engine.events import ListenerRegistry, RefreshBus, Unsubscribe
from engine.state import RefreshState
from quaiscan_client.async_rest import QuaiscanError
from quaiscan_client.constants import DEFAULT_OFFSET, DEFAULT_PAGE
from quaiscan_client.models import BalanceResponse, TrackerStats, TxListResponse
from utils.formatting import ZERO_BALANCE, describe_age, format_quai

LOGGER = logging.getLogger("quaiscan.coordinator")

FOREGROUND_ERROR_MESSAGE = "Failed to fetch dashboard data. Check logs for details."


class FetchKind(str, Enum):
    FOREGROUND = "foreground"
    BACKGROUND = "background"


class CoordinatorPhase(str, Enum):
    IDLE = "idle"
    FOREGROUND_FETCHING = "foreground_fetching"
    BACKGROUND_FETCHING = "background_fetching"


class DashboardClient(Protocol):
    async def get_balance(self, address: str) -> BalanceResponse: ...

    async def get_transactions(
        self, address: str, page: int = ..., offset: int = ...
    ) -> TxListResponse: ...

    def tracker_stats(self) -> TrackerStats: ...


@dataclass(frozen=True)
class RefreshConfig:
    address: str
    poll_interval_sec: float = 15.0
    label_interval_sec: float = 1.0
    page: int = DEFAULT_PAGE
    offset: int = DEFAULT_OFFSET


StateHandler = Callable[[RefreshState], None]


class RefreshCoordinator:
    """Decides when dashboard data is fetched and where the results go.

    Requests for a fetch kind that is already in flight join the running
    fetch. A successful fetch that started before the most recently applied
    one is discarded so an older snapshot never overwrites a newer one.
    After ``unmount()`` in-flight fetches keep running but their results are
    dropped.
    """

    def __init__(
        self,
        client: DashboardClient,
        balance_store: SharedBalanceStore,
        refresh_bus: RefreshBus,
        config: RefreshConfig,
        *,
        time_provider: Callable[[], float] | None = None,
    ) -> None:
        self.client = client
        self.balance_store = balance_store
        self.refresh_bus = refresh_bus
        self.config = config
        self._time_provider = time_provider or time.time
        self.state = RefreshState(
            last_updated=self._time_provider(), stats=client.tracker_stats()
        )
        self._listeners: ListenerRegistry[StateHandler] = ListenerRegistry()
        self._inflight: dict[FetchKind, asyncio.Task[None]] = {}
        self._pending: set[asyncio.Task[None]] = set()
        self._timers: list[asyncio.Task[None]] = []
        self._unsubscribe_bus: Unsubscribe | None = None
        self._mounted = False
        self._disposed = False
        self._sequence = 0
        self._applied_sequence = 0

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def phase(self) -> CoordinatorPhase:
        if self._is_inflight(FetchKind.FOREGROUND):
            return CoordinatorPhase.FOREGROUND_FETCHING
        if self._is_inflight(FetchKind.BACKGROUND):
            return CoordinatorPhase.BACKGROUND_FETCHING
        return CoordinatorPhase.IDLE

    def subscribe(self, handler: StateHandler) -> Unsubscribe:
        return self._listeners.add(handler)

    def mount(self) -> None:
        """Start timers, listen for manual refreshes and run the initial fetch.

        Must be called from a running event loop.
        """
        if self._disposed:
            raise RuntimeError("Coordinator was unmounted; build a new one to remount.")
        if self._mounted:
            raise RuntimeError("Coordinator is already mounted.")
        self._mounted = True
        self._unsubscribe_bus = self.refresh_bus.subscribe(self._on_refresh_requested)
        self._timers = [
            asyncio.create_task(self._poll_loop()),
            asyncio.create_task(self._label_loop()),
        ]
        LOGGER.info(
            "Dashboard mounted for %s (poll every %ss)",
            self.config.address,
            self.config.poll_interval_sec,
            extra={"address": self.config.address},
        )
        self.request_refresh(FetchKind.FOREGROUND)

    async def unmount(self) -> None:
        """Release subscriptions and timers. In-flight fetches are not cancelled."""
        if not self._mounted:
            return
        self._mounted = False
        self._disposed = True
        if self._unsubscribe_bus is not None:
            self._unsubscribe_bus()
            self._unsubscribe_bus = None
        for timer in self._timers:
            timer.cancel()
        await asyncio.gather(*self._timers, return_exceptions=True)
        self._timers = []
        LOGGER.info(
            "Dashboard unmounted (%d fetch(es) still in flight)",
            len(self._pending),
            extra={"address": self.config.address},
        )

    def request_refresh(self, kind: FetchKind = FetchKind.FOREGROUND) -> asyncio.Task[None]:
        existing = self._inflight.get(kind)
        if existing is not None and not existing.done():
            LOGGER.debug("Joining in-flight %s fetch", kind.value)
            return existing

        self._sequence += 1
        self.state.mark_fetching(background=kind is FetchKind.BACKGROUND)
        task = asyncio.create_task(self._fetch(kind, self._sequence))
        self._inflight[kind] = task
        self._pending.add(task)
        task.add_done_callback(lambda done: self._forget(kind, done))
        self._notify()
        return task

    async def refresh(self, kind: FetchKind = FetchKind.FOREGROUND) -> None:
        await self.request_refresh(kind)

    async def drain(self) -> None:
        """Wait until every fetch started so far has settled."""
        while True:
            pending = [task for task in self._pending if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending)

    def update_label(self) -> str:
        label = describe_age(self._time_provider() - self.state.last_updated)
        if label != self.state.last_updated_label:
            self.state.last_updated_label = label
            self._notify()
        return label

    def _on_refresh_requested(self) -> None:
        self.request_refresh(FetchKind.FOREGROUND)

    def _is_inflight(self, kind: FetchKind) -> bool:
        task = self._inflight.get(kind)
        return task is not None and not task.done()

    def _forget(self, kind: FetchKind, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if self._inflight.get(kind) is task:
            del self._inflight[kind]

    async def _fetch(self, kind: FetchKind, sequence: int) -> None:
        background = kind is FetchKind.BACKGROUND
        extra = {"address": self.config.address, "fetch_kind": kind.value}
        try:
            balance, transactions = await self._load()
        except (QuaiscanError, ValueError) as exc:
            if self._disposed:
                LOGGER.debug("Dropping %s failure after unmount: %s", kind.value, exc)
            elif background:
                LOGGER.warning("Background refresh failed: %s", exc, extra=extra)
            else:
                LOGGER.error("Refresh failed: %s", exc, extra=extra)
                self.state.mark_error(FOREGROUND_ERROR_MESSAGE)
        else:
            if self._disposed:
                LOGGER.debug("Dropping %s result after unmount", kind.value)
            elif sequence < self._applied_sequence:
                LOGGER.info(
                    "Discarding stale %s result (fetch #%d, applied #%d)",
                    kind.value,
                    sequence,
                    self._applied_sequence,
                    extra=extra,
                )
            else:
                self._applied_sequence = sequence
                self._apply(balance, transactions)
        finally:
            if not self._disposed:
                self.state.mark_settled(
                    background=background, stats=self.client.tracker_stats()
                )
                self._notify()

    async def _load(self) -> tuple[BalanceResponse, TxListResponse]:
        address = self.config.address
        results = await asyncio.gather(
            self.client.get_balance(address),
            self.client.get_transactions(
                address, page=self.config.page, offset=self.config.offset
            ),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        balance, transactions = results
        return balance, transactions

    def _apply(self, balance: BalanceResponse, transactions: TxListResponse) -> None:
        if balance.ok:
            self.balance_store.set(format_quai(balance.result))
        else:
            self.balance_store.set(ZERO_BALANCE)
        self.state.update_transactions(
            transactions.transactions if transactions.ok else [],
            self._time_provider(),
        )
        self.state.last_updated_label = describe_age(0)

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.poll_interval_sec)
            if self.state.loading:
                LOGGER.debug("Skipping poll tick while a foreground fetch is running")
                continue
            self.request_refresh(FetchKind.BACKGROUND)

    async def _label_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.label_interval_sec)
            self.update_label()

    def _notify(self) -> None:
        for handler in self._listeners.snapshot():
            handler(self.state)
