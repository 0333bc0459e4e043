from __future__ import annotations

import pytest
from pydantic import ValidationError

from quaiscan_client.models import BalanceResponse, Transaction, TxListResponse


def test_transaction_accepts_api_keys_and_keeps_unknown_fields() -> None:
    raw = {
        "hash": "0x1",
        "blockNumber": 12,
        "from": "0xa",
        "to": "0xb",
        "value": "5",
        "methodId": "0xa9059cbb",
        "nonce": "7",
    }

    tx = Transaction.model_validate(raw)

    assert tx.block_number == "12"
    assert tx.from_address == "0xa"
    assert tx.method_id == "0xa9059cbb"
    assert tx.model_extra == {"nonce": "7"}
    payload = tx.to_payload()
    assert payload["blockNumber"] == "12"
    assert payload["from"] == "0xa"
    assert "gasPrice" not in payload


def test_transaction_is_immutable_and_requires_hash() -> None:
    tx = Transaction(hash="0x1")
    with pytest.raises(ValidationError):
        tx.value = "1"  # type: ignore[misc]
    with pytest.raises(ValidationError):
        Transaction.model_validate({"value": "1"})


def test_envelopes_tolerate_missing_and_numeric_fields() -> None:
    balance = BalanceResponse.model_validate({"status": 1, "result": 10})
    empty = TxListResponse.model_validate({})

    assert balance.ok
    assert balance.result == "10"
    assert not empty.ok
    assert empty.transactions == []

