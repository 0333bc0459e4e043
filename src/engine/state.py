"""Refresh state tracked by the dashboard coordinator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from quaiscan_client.models import TrackerStats, Transaction


@dataclass
class RefreshState:
    transactions: list[Transaction] = field(default_factory=list)
    loading: bool = False
    background_fetching: bool = False
    error: str | None = None
    last_updated: float = 0.0
    last_updated_label: str = "just now"
    stats: TrackerStats = field(default_factory=TrackerStats)

    def mark_fetching(self, *, background: bool) -> None:
        if background:
            self.background_fetching = True
        else:
            self.loading = True
        self.error = None

    def mark_settled(self, *, background: bool, stats: TrackerStats) -> None:
        if background:
            self.background_fetching = False
        else:
            self.loading = False
        self.stats = stats

    def mark_error(self, message: str) -> None:
        self.error = message

    def update_transactions(
        self, transactions: Iterable[Transaction], updated_at: float
    ) -> None:
        self.transactions = list(transactions)
        self.last_updated = updated_at

    def to_payload(self) -> dict[str, Any]:
        return {
            "transactions": [tx.to_payload() for tx in self.transactions],
            "loading": self.loading,
            "background_fetching": self.background_fetching,
            "error": self.error,
            "last_updated": self.last_updated,
            "last_updated_label": self.last_updated_label,
            "stats": {
                "requests": self.stats.requests,
                "errors": self.stats.errors,
                "last_request_time": self.stats.last_request_time,
                "logs": list(self.stats.logs),
            },
        }
