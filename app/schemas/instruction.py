"""Pydantic schemas for uploaded payroll payment instructions (pain.001)."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from app.core.config import settings
from app.schemas.common import CamelModel


class Initiator(CamelModel):
    """Party that initiated the payroll batch (``GrpHdr/InitgPty``)."""

    name: str = "Unknown"
    id: str = "UNKNOWN"


class Employee(CamelModel):
    """Recipient of a single payroll payment."""

    name: Optional[str] = None
    address: str = Field(
        "",
        description="Chain address; format is checked at the transfer boundary",
    )
    employee_id: str = ""


class Payment(CamelModel):
    """One instruction line of a payroll batch."""

    id: str
    employee: Employee
    amount: str = Field(
        "",
        description="Decimal string; converted to minor units only at execution",
    )
    currency: str = "USD"
    token: str = Field(default_factory=lambda: settings.primary_token)
    memo: Optional[str] = None


class PaymentInstruction(CamelModel):
    """A single uploaded payroll batch.

    ``payments`` is a tuple: order decides execution order and is preserved
    in reports, and no stage is allowed to mutate it after parsing.
    """

    message_id: str
    creation_date_time: str = ""
    number_of_transactions: int = 0
    control_sum: Optional[Decimal] = Field(
        None,
        description="Declared batch total; None when absent or malformed",
    )
    initiator: Initiator = Field(default_factory=Initiator)
    fee_token: str = Field(default_factory=lambda: settings.fee_token)
    payments: tuple[Payment, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _fill_declared_count(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if (
            data.get("numberOfTransactions") is None
            and data.get("number_of_transactions") is None
        ):
            data = dict(data)
            data["numberOfTransactions"] = len(data.get("payments") or ())
        return data

    @field_validator("control_sum", mode="before")
    @classmethod
    def _lenient_control_sum(cls, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return None
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
        return parsed if parsed.is_finite() else None
