"""Display helpers for balances, amounts and refresh timestamps."""

from __future__ import annotations

from datetime import datetime, timezone

from quaiscan_client.constants import CURRENCY_SYMBOL, DISPLAY_DECIMALS, WEI_DECIMALS
from quaiscan_client.models import Transaction

ZERO_BALANCE = f"0 {CURRENCY_SYMBOL}"


def format_quai(wei: str | None) -> str:
    """
    Convert a wei-scale integer string into a QUAI display string.

    The fractional part is truncated to four digits, never rounded.

    Examples:
        "12345600000000000000" -> "12.3456 QUAI"
        "0" -> "0.0000 QUAI"
        "not-a-number" -> "not-a-number (raw)"
    """
    if not wei:
        return "0"
    try:
        value = int(wei)
    except (TypeError, ValueError):
        return f"{wei} (raw)"
    divisor = 10**WEI_DECIMALS
    integer_part, remainder = divmod(abs(value), divisor)
    sign = "-" if value < 0 else ""
    fraction = str(remainder).zfill(WEI_DECIMALS)[:DISPLAY_DECIMALS]
    return f"{sign}{integer_part}.{fraction} {CURRENCY_SYMBOL}"


def quai_amount(wei: str | None) -> str:
    """Return only the numeric part of ``format_quai``."""
    return format_quai(wei).split(" ")[0]


def describe_age(seconds: float) -> str:
    if seconds < 5:
        return "just now"
    if seconds < 60:
        return f"{int(seconds)}s ago"
    return f"{int(seconds // 60)}m ago"


def transfer_direction(tx: Transaction, wallet: str) -> str:
    """Classify a transaction as ``"out"``, ``"in"`` or ``"other"`` for a wallet."""
    wallet_key = wallet.lower()
    if tx.from_address.lower() == wallet_key:
        return "out"
    if tx.to_address.lower() == wallet_key:
        return "in"
    return "other"


def format_tx_date(tx: Transaction) -> str:
    # "Jan 5, 2024"
    try:
        moment = datetime.fromtimestamp(int(tx.time_stamp), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return ""
    return f"{moment:%b} {moment.day}, {moment.year}"
