"""Pydantic schemas for batch execution: transfer outcomes and progress."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.report import PaymentResult


class TransferReceipt(CamelModel):
    """Confirmation receipt returned by the wallet/RPC layer."""

    block_number: int
    gas_used: Optional[int] = None
    status: str = Field("success", description="success | reverted")


class TransferOutcome(CamelModel):
    """What the injected transfer capability resolves to."""

    hash: str
    receipt: TransferReceipt


class TransferCall(CamelModel):
    """A single token transfer, as submitted to the chain."""

    to: str
    amount: int = Field(..., description="Integer minor units")
    token: str
    fee_token: str
    memo: Optional[str] = Field(None, description="0x-prefixed 32-byte memo")


class BatchProgress(CamelModel):
    """Progress snapshot emitted while a batch is executing."""

    current_batch: int
    total_batches: int
    current_transaction: int
    total_transactions: int
    completed_transactions: int
    failed_transactions: int


class BatchExecutionResult(CamelModel):
    """Everything the executor knows once every payment has been attempted."""

    results: tuple[PaymentResult, ...]
    total_time_ms: int
    total_fees: str
    success_count: int
    failure_count: int
