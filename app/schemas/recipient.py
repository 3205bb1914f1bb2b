"""Pydantic schemas for saved recipients and the activity log."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field

from app.schemas.common import CamelModel

ActivityKind = Literal[
    "send_payment",
    "faucet_fund",
    "set_fee_token",
    "payroll_execution",
]


class Recipient(CamelModel):
    """An address book entry."""

    id: str
    name: str = Field(..., max_length=50)
    address: str
    created_at: int = Field(..., description="Unix epoch milliseconds")
    last_used: Optional[int] = None


class RecipientCreate(CamelModel):
    """Request body for saving a new recipient."""

    name: str
    address: str


class ActivityLogEntry(CamelModel):
    """One on-chain action the user performed from this device."""

    kind: ActivityKind
    hash: str
    created_at: int = Field(..., description="Unix epoch milliseconds")
    chain_id: int
    title: Optional[str] = None
    details: Optional[str] = None
