"""Persistence of generated status reports as PayrollRun rows."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models.payroll_run import PayrollRun
from app.schemas.report import PaymentStatusReport

logger = get_logger(__name__)


def save_run(db: Session, report: PaymentStatusReport) -> PayrollRun:
    """Insert a PayrollRun for ``report`` and commit."""
    run = PayrollRun(
        id=uuid.uuid4(),
        message_id=report.message_id,
        original_message_id=report.original_message_id,
        status=report.status,
        number_of_transactions=report.number_of_transactions,
        number_of_successful=report.number_of_successful,
        number_of_failed=report.number_of_failed,
        total_amount_processed=Decimal(report.total_amount_processed),
        total_fees_paid=report.total_fees_paid,
        report=report.to_wire(),
    )
    db.add(run)
    db.commit()
    logger.info("Saved payroll run %s (%s)", run.id, report.status)
    return run


def get_run(db: Session, run_id: uuid.UUID) -> Optional[PayrollRun]:
    return db.query(PayrollRun).filter(PayrollRun.id == run_id).first()


def list_runs(db: Session) -> list[PayrollRun]:
    """All runs, newest first."""
    return db.query(PayrollRun).order_by(PayrollRun.created_at.desc()).all()


def report_of(run: PayrollRun) -> PaymentStatusReport:
    """Rebuild the frozen report from a stored run."""
    return PaymentStatusReport.model_validate(run.report)
