"""Payroll run model: one persisted pain.002 status report per execution."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class PayrollRun(Base):
    """Aggregated result of executing one uploaded payroll instruction.

    The summary columns are denormalized from ``report`` so runs can be
    listed without decoding the JSON blob.
    """

    __tablename__ = "payroll_runs"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )
    message_id: Mapped[str] = mapped_column(
        String(140),
        nullable=False,
    )
    original_message_id: Mapped[str] = mapped_column(
        String(140),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        comment="COMPLETED | PARTIALLY_COMPLETED | FAILED",
    )
    number_of_transactions: Mapped[int] = mapped_column(
        Integer,
        default=0,
    )
    number_of_successful: Mapped[int] = mapped_column(
        Integer,
        default=0,
    )
    number_of_failed: Mapped[int] = mapped_column(
        Integer,
        default=0,
    )
    total_amount_processed: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(20, 6),
        default=0,
    )
    total_fees_paid: Mapped[Optional[str]] = mapped_column(
        String(40),
    )
    report: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return (
            f"<PayrollRun(id={self.id!r}, status={self.status!r}, "
            f"successful={self.number_of_successful}/{self.number_of_transactions})>"
        )
