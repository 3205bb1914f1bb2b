"""Request and response bodies for the payroll API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from app.schemas.common import CamelModel
from app.schemas.instruction import PaymentInstruction
from app.schemas.report import PaymentResult, PaymentStatusReport
from app.schemas.validation import ValidationResult


class UploadResponse(CamelModel):
    """Returned after uploading and validating a payroll file."""

    instruction: PaymentInstruction
    validation: ValidationResult


class ValidateRequest(CamelModel):
    """Re-validate an already parsed instruction against a balance."""

    instruction: PaymentInstruction
    available_balance: str = Field(
        ...,
        description="Spendable balance of the payment token, decimal string",
    )


class ReportRequest(CamelModel):
    """Execution results posted back by the wallet layer."""

    instruction: PaymentInstruction
    results: list[PaymentResult]
    execution_time_ms: int = Field(..., ge=0)
    total_fees: str = "0.000"


class PayrollRunSummary(CamelModel):
    """Lightweight listing row for a stored payroll run."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    message_id: str
    original_message_id: str
    status: str
    number_of_transactions: int = 0
    number_of_successful: int = 0
    number_of_failed: int = 0
    total_fees_paid: Optional[str] = None
    created_at: Optional[datetime] = None


class PayrollRunResponse(CamelModel):
    """A stored run together with its full status report."""

    id: UUID
    created_at: Optional[datetime] = None
    report: PaymentStatusReport
