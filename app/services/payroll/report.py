"""pain.002-style status report generation.

The report is a pure fold over per-payment results: it is rebuilt from
scratch every time, never patched in place.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from app.core.logging import get_logger
from app.schemas.instruction import PaymentInstruction
from app.schemas.report import PaymentResult, PaymentStatusReport, ReportStatus
from app.services.ingestion.normalizer import parse_decimal, utc_now_iso

logger = get_logger(__name__)


def derive_status(results: Sequence[PaymentResult]) -> ReportStatus:
    """COMPLETED when every payment succeeded, FAILED when none did.

    An empty result list counts as COMPLETED: nothing was left undone.
    """
    successful = sum(1 for r in results if r.status == "COMPLETED")
    if successful == len(results):
        return "COMPLETED"
    if successful > 0:
        return "PARTIALLY_COMPLETED"
    return "FAILED"


def generate_report(
    instruction: PaymentInstruction,
    results: Sequence[PaymentResult],
    execution_time_ms: int,
    total_fees: str,
) -> PaymentStatusReport:
    """Aggregate execution results into a PaymentStatusReport.

    Args:
        instruction: The instruction the results belong to.
        results: One result per payment, in execution order.
        execution_time_ms: Wall-clock duration of the run.
        total_fees: Fees paid, already formatted in fee-token units.

    Returns:
        A new report; ``payments`` preserves the order of ``results``.
    """
    completed = [r for r in results if r.status == "COMPLETED"]
    failed = [r for r in results if r.status == "FAILED"]
    processed = sum(
        (parse_decimal(r.amount) or Decimal(0) for r in completed), Decimal(0)
    )

    report = PaymentStatusReport(
        message_id=f"STATUS-{instruction.message_id}",
        creation_date_time=utc_now_iso(),
        original_message_id=instruction.message_id,
        status=derive_status(results),
        number_of_transactions=len(results),
        number_of_successful=len(completed),
        number_of_failed=len(failed),
        total_amount_processed=f"{processed:.2f}",
        total_fees_paid=total_fees,
        execution_time=f"{execution_time_ms / 1000:.1f}s",
        payments=tuple(results),
    )

    logger.info(
        "Status report %s: status=%s ok=%d failed=%d",
        report.message_id,
        report.status,
        report.number_of_successful,
        report.number_of_failed,
    )
    return report
