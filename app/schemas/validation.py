"""Pydantic schemas for validation results.

Validation issues are plain data returned to the caller, never raised.
Errors block execution; warnings are informational only.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class ValidationError(CamelModel):
    """A blocking problem: executing the batch would fail or overspend."""

    code: str = Field(..., description="NO_PAYMENTS | INSUFFICIENT_BALANCE")
    message: str
    payment_id: Optional[str] = None
    field: Optional[str] = None


class ValidationWarning(CamelModel):
    """A non-blocking recommendation the user may proceed past."""

    code: str = Field(
        ...,
        description=(
            "DUPLICATE_ADDRESS | INVALID_AMOUNT | LARGE_AMOUNT "
            "| SMALL_AMOUNT | MISSING_MEMO"
        ),
    )
    message: str
    payment_id: Optional[str] = None


class ValidationResult(CamelModel):
    """Outcome of validating one instruction against an available balance."""

    valid: bool
    errors: tuple[ValidationError, ...] = ()
    warnings: tuple[ValidationWarning, ...] = ()
