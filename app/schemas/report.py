"""Pydantic schemas for per-payment results and pain.002 status reports."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, model_validator

from app.schemas.common import CamelModel

PaymentStatus = Literal["PENDING", "COMPLETED", "FAILED"]
ReportStatus = Literal["COMPLETED", "PARTIALLY_COMPLETED", "FAILED"]


class ResultEmployee(CamelModel):
    """Recipient details echoed into a payment result."""

    name: str
    address: str


class PaymentResult(CamelModel):
    """Execution outcome of a single payment.

    A result starts PENDING and moves once to COMPLETED or FAILED.  Only
    the branch matching the status is populated: chain fields on success,
    ``error_code``/``error_message`` on failure.
    """

    id: str
    status: PaymentStatus
    employee: ResultEmployee
    amount: str
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    timestamp: Optional[str] = None
    explorer_url: Optional[str] = None
    gas_used: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @model_validator(mode="after")
    def _one_terminal_branch(self) -> "PaymentResult":
        if self.status == "COMPLETED" and self.error_code is not None:
            raise ValueError("completed result cannot carry an error code")
        if self.status == "FAILED" and self.error_code is None:
            raise ValueError("failed result requires an error code")
        return self


class PaymentStatusReport(CamelModel):
    """Aggregate pain.002-style report for one payroll instruction."""

    message_id: str
    creation_date_time: str
    original_message_id: str
    status: ReportStatus = Field(
        ...,
        description="COMPLETED | PARTIALLY_COMPLETED | FAILED",
    )
    number_of_transactions: int
    number_of_successful: int
    number_of_failed: int
    total_amount_processed: str
    total_fees_paid: str
    execution_time: str
    payments: tuple[PaymentResult, ...] = ()
