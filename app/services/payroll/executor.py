"""Sequential batch executor for payroll payments.

Each payment becomes one on-chain transfer through an injected
``transfer_fn``.  Transfers need an individual passkey approval from the
user, so they run strictly one after another; the fixed-size windows only
exist to give the caller coarse progress updates and a short pause between
groups.  A failing payment is recorded and the batch moves on.
"""

from __future__ import annotations

import asyncio
import time
from decimal import Decimal
from typing import Any, Awaitable, Callable, Optional, Sequence

from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.schemas.execution import BatchExecutionResult, BatchProgress, TransferOutcome
from app.schemas.instruction import Payment
from app.schemas.report import PaymentResult, ResultEmployee
from app.services.ingestion.normalizer import is_valid_address, utc_now_iso
from app.services.payroll.tokens import to_minor_units, token_decimals

logger = get_logger(__name__)

MEMO_SIZE_BYTES = 32

# transfer_fn(to=, amount=, token=, fee_token=, memo=) -> TransferOutcome
TransferFn = Callable[..., Awaitable[Any]]
ProgressCallback = Callable[[BatchProgress], None]


def encode_memo(memo: str) -> str:
    """Encode a memo as a 0x-prefixed, left-zero-padded 32-byte hex field.

    Raises:
        ValueError: If the UTF-8 memo is longer than 32 bytes.
    """
    raw = memo.encode("utf-8")
    if len(raw) > MEMO_SIZE_BYTES:
        raise ValueError(
            f"Memo is {len(raw)} bytes, exceeds {MEMO_SIZE_BYTES}-byte memo field"
        )
    return "0x" + raw.rjust(MEMO_SIZE_BYTES, b"\x00").hex()


def transfer_amount(payment: Payment, config: Settings) -> int:
    """Minor-unit amount to send for ``payment``.

    Raises:
        ValueError: If the amount is malformed or not strictly positive.
    """
    amount = to_minor_units(payment.amount, token_decimals(payment.token, config))
    if amount <= 0:
        raise ValueError(f"Amount must be positive: {payment.amount!r}")
    return amount


def chunk(items: Sequence[Any], size: int) -> list[list[Any]]:
    """Split ``items`` into consecutive windows of at most ``size``."""
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class BatchExecutor:
    """Executes a payroll batch one transfer at a time."""

    def __init__(self, config: Settings = settings) -> None:
        self.config = config

    # ── Public API ───────────────────────────────────────────────────

    async def execute(
        self,
        payments: Sequence[Payment],
        fee_token: str,
        transfer_fn: TransferFn,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchExecutionResult:
        """Attempt every payment in order and collect one result per payment.

        Args:
            payments: Payments in execution order.
            fee_token: Token used to pay network fees for every transfer.
            transfer_fn: Awaitable transfer capability supplied by the
                wallet layer; it resolves once a receipt is available.
            on_progress: Optional callback receiving BatchProgress snapshots.

        Returns:
            A BatchExecutionResult whose ``results`` mirror ``payments``.
        """
        start = time.monotonic()
        windows = chunk(payments, self.config.batch_size)
        total = len(payments)
        results: list[PaymentResult] = []

        logger.info(
            "Batch execution started: payments=%d windows=%d", total, len(windows)
        )

        for window_idx, window in enumerate(windows):
            first_position = window_idx * self.config.batch_size

            self._report(
                on_progress,
                window_idx,
                len(windows),
                first_position + 1,
                total,
                results,
            )

            for offset, payment in enumerate(window):
                self._report(
                    on_progress,
                    window_idx,
                    len(windows),
                    first_position + offset + 1,
                    total,
                    results,
                )
                results.append(await self._execute_one(payment, fee_token, transfer_fn))

            self._report(
                on_progress,
                window_idx,
                len(windows),
                min(first_position + len(window), total),
                total,
                results,
            )

            # Pace between windows only, never after the last one
            if window_idx < len(windows) - 1:
                await asyncio.sleep(self.config.batch_pause_ms / 1000)

        success_count = sum(1 for r in results if r.status == "COMPLETED")
        total_fees = Decimal(str(self.config.fee_per_transaction)) * success_count
        elapsed_ms = int((time.monotonic() - start) * 1000)

        logger.info(
            "Batch execution complete: success=%d failed=%d time=%dms",
            success_count,
            len(results) - success_count,
            elapsed_ms,
        )
        return BatchExecutionResult(
            results=tuple(results),
            total_time_ms=elapsed_ms,
            total_fees=f"{total_fees:.3f}",
            success_count=success_count,
            failure_count=len(results) - success_count,
        )

    # ── Private helpers ──────────────────────────────────────────────

    async def _execute_one(
        self,
        payment: Payment,
        fee_token: str,
        transfer_fn: TransferFn,
    ) -> PaymentResult:
        """Run one transfer and turn its outcome into a terminal result."""
        pending = PaymentResult(
            id=payment.id,
            status="PENDING",
            employee=ResultEmployee(
                name=payment.employee.name or payment.id,
                address=payment.employee.address,
            ),
            amount=payment.amount,
        )

        try:
            if not is_valid_address(payment.employee.address):
                raise ValueError(
                    f"Invalid recipient address: {payment.employee.address!r}"
                )
            amount = transfer_amount(payment, self.config)
            memo = encode_memo(payment.memo) if payment.memo else None

            raw = await transfer_fn(
                to=payment.employee.address,
                amount=amount,
                token=payment.token,
                fee_token=fee_token,
                memo=memo,
            )
            outcome = (
                raw
                if isinstance(raw, TransferOutcome)
                else TransferOutcome.model_validate(raw)
            )
        except Exception as exc:
            logger.warning("Payment %s failed: %s", payment.id, exc)
            return pending.model_copy(
                update={
                    "status": "FAILED",
                    "error_code": "TRANSACTION_FAILED",
                    "error_message": str(exc) or type(exc).__name__,
                }
            )

        gas_used = (
            str(outcome.receipt.gas_used)
            if outcome.receipt.gas_used is not None
            else self.config.gas_estimate_placeholder
        )
        logger.info(
            "Payment %s confirmed: tx=%s block=%d",
            payment.id,
            outcome.hash,
            outcome.receipt.block_number,
        )
        return pending.model_copy(
            update={
                "status": "COMPLETED",
                "transaction_hash": outcome.hash,
                "block_number": outcome.receipt.block_number,
                "timestamp": utc_now_iso(),
                "explorer_url": f"{self.config.explorer_url}/tx/{outcome.hash}",
                "gas_used": gas_used,
            }
        )

    @staticmethod
    def _report(
        on_progress: Optional[ProgressCallback],
        window_idx: int,
        total_windows: int,
        current: int,
        total: int,
        results: list[PaymentResult],
    ) -> None:
        if on_progress is None:
            return
        on_progress(
            BatchProgress(
                current_batch=window_idx + 1,
                total_batches=total_windows,
                current_transaction=current,
                total_transactions=total,
                completed_transactions=sum(1 for r in results if r.status == "COMPLETED"),
                failed_transactions=sum(1 for r in results if r.status == "FAILED"),
            )
        )


async def execute_batch(
    payments: Sequence[Payment],
    fee_token: str,
    transfer_fn: TransferFn,
    on_progress: Optional[ProgressCallback] = None,
    config: Settings = settings,
) -> BatchExecutionResult:
    """Convenience wrapper around ``BatchExecutor(config).execute``."""
    return await BatchExecutor(config).execute(
        payments, fee_token, transfer_fn, on_progress
    )
