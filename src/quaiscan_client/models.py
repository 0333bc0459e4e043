"""Shared data models for the QuaiScan client.

Pydantic-based models for the explorer's response envelopes and the
request telemetry snapshot.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quaiscan_client.constants import STATUS_OK


def _coerce_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Transaction(BaseModel):
    """Transaction record as returned by ``txlist``.

    Attribute names are snake_case; the API's own keys are accepted as
    aliases and any unknown keys are preserved.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    hash: str
    block_number: str = Field(default="", alias="blockNumber")
    time_stamp: str = Field(default="", alias="timeStamp")
    from_address: str = Field(default="", alias="from")
    to_address: str = Field(default="", alias="to")
    value: str = "0"
    gas: str = ""
    gas_price: str = Field(default="", alias="gasPrice")
    is_error: str = Field(default="", alias="isError")
    txreceipt_status: str = ""
    input: str = ""
    contract_address: str = Field(default="", alias="contractAddress")
    cumulative_gas_used: str = Field(default="", alias="cumulativeGasUsed")
    gas_used: str = Field(default="", alias="gasUsed")
    confirmations: str = ""
    method_id: str | None = Field(default=None, alias="methodId")
    function_name: str | None = Field(default=None, alias="functionName")

    @field_validator(
        "block_number",
        "time_stamp",
        "from_address",
        "to_address",
        "value",
        "gas",
        "gas_price",
        "is_error",
        "txreceipt_status",
        "input",
        "contract_address",
        "cumulative_gas_used",
        "gas_used",
        "confirmations",
        mode="before",
    )
    @classmethod
    def coerce_numeric_fields(cls, v: Any) -> Any:
        """Accept numbers where the explorer normally sends strings."""
        return _coerce_text(v)

    def to_payload(self) -> dict[str, Any]:
        """Return the record keyed the way the API sends it."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class ApiEnvelope(BaseModel):
    """Common ``{status, message, result}`` response envelope."""

    model_config = ConfigDict(frozen=True)

    status: str = ""
    message: str = ""

    @field_validator("status", "message", mode="before")
    @classmethod
    def coerce_envelope_fields(cls, v: Any) -> Any:
        return _coerce_text(v)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


class BalanceResponse(ApiEnvelope):
    """Response of ``module=account&action=balance``."""

    result: str = ""

    @field_validator("result", mode="before")
    @classmethod
    def coerce_result(cls, v: Any) -> Any:
        return _coerce_text(v)


class TxListResponse(ApiEnvelope):
    """Response of ``module=account&action=txlist``.

    Soft errors carry a plain string in ``result`` instead of a list.
    """

    result: list[Transaction] | str | None = Field(default_factory=list)

    @property
    def transactions(self) -> list[Transaction]:
        if isinstance(self.result, list):
            return list(self.result)
        return []


class TrackerStats(BaseModel):
    """Immutable snapshot of request telemetry for the session."""

    model_config = ConfigDict(frozen=True)

    requests: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)
    last_request_time: float | None = None
    logs: tuple[str, ...] = ()
