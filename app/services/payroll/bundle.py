"""One-approval payroll: every payment in a single multi-call transaction.

The alternative to the sequential executor.  All transfers are submitted
together through the wallet's ``send_calls`` capability, and one receipt
decides the fate of every payment: they all land or they all fail.
"""

from __future__ import annotations

import time
from typing import Optional, Protocol

from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.schemas.execution import BatchExecutionResult, TransferCall, TransferReceipt
from app.schemas.instruction import PaymentInstruction
from app.schemas.report import PaymentResult, ResultEmployee
from app.services.ingestion.normalizer import utc_now_iso
from app.services.payroll.executor import encode_memo, transfer_amount

logger = get_logger(__name__)

# 0x + 32-byte transaction hash
_TX_HASH_LENGTH = 66


class BundleError(RuntimeError):
    """Raised when a bundle cannot be built or its hash cannot be recovered."""


class BundleTransport(Protocol):
    """Wallet-side capability used to submit and confirm a bundle."""

    async def send_calls(self, calls: list[TransferCall]) -> str:
        """Submit the calls; returns the wallet's calls id."""
        ...

    async def wait_for_receipt(self, tx_hash: str) -> TransferReceipt:
        """Block until the transaction is mined."""
        ...


def extract_tx_hash(calls_id: str) -> Optional[str]:
    """Recover the transaction hash from a Tempo ``send_calls`` id.

    The id is ``tx hash (32 bytes) + chain id (32 bytes) + magic (32 bytes)``;
    the hash is its first 32 bytes.
    """
    if not isinstance(calls_id, str) or not calls_id.startswith("0x"):
        return None
    if len(calls_id) < _TX_HASH_LENGTH:
        return None
    return calls_id[:_TX_HASH_LENGTH]


class BundleExecutor:
    """Executes a whole instruction as one multi-call transaction."""

    def __init__(self, config: Settings = settings) -> None:
        self.config = config

    def build_calls(self, instruction: PaymentInstruction) -> list[TransferCall]:
        """Turn every payment into a transfer call, in instruction order."""
        calls: list[TransferCall] = []
        for payment in instruction.payments:
            try:
                calls.append(
                    TransferCall(
                        to=payment.employee.address,
                        amount=transfer_amount(payment, self.config),
                        token=payment.token,
                        fee_token=instruction.fee_token,
                        memo=encode_memo(payment.memo) if payment.memo else None,
                    )
                )
            except ValueError as exc:
                raise BundleError(f"Payment {payment.id}: {exc}") from exc
        return calls

    async def execute(
        self,
        instruction: PaymentInstruction,
        transport: BundleTransport,
    ) -> BatchExecutionResult:
        """Submit the bundle, wait for its receipt and fan the outcome out.

        Raises:
            BundleError: If a payment cannot be encoded or the calls id does
                not carry a transaction hash.
        """
        start = time.monotonic()
        calls = self.build_calls(instruction)

        calls_id = await transport.send_calls(calls)
        tx_hash = extract_tx_hash(calls_id)
        if tx_hash is None:
            raise BundleError("Batch submitted but tx hash could not be determined.")

        logger.info(
            "Bundle submitted: msg=%s calls=%d tx=%s",
            instruction.message_id,
            len(calls),
            tx_hash,
        )
        receipt = await transport.wait_for_receipt(tx_hash)
        succeeded = receipt.status == "success"

        timestamp = utc_now_iso()
        results = []
        for payment in instruction.payments:
            fields = {
                "id": payment.id,
                "status": "COMPLETED" if succeeded else "FAILED",
                "employee": ResultEmployee(
                    name=payment.employee.name or payment.id,
                    address=payment.employee.address,
                ),
                "amount": payment.amount,
                "transaction_hash": tx_hash,
                "block_number": receipt.block_number,
                "timestamp": timestamp,
                "explorer_url": f"{self.config.explorer_url}/tx/{tx_hash}",
                "gas_used": self.config.gas_estimate_placeholder,
            }
            if not succeeded:
                fields["error_code"] = "BUNDLE_FAILED"
                fields["error_message"] = (
                    f"Batch transaction failed (status: {receipt.status})"
                )
            results.append(PaymentResult(**fields))

        if succeeded:
            logger.info("Bundle %s confirmed in block %d", tx_hash, receipt.block_number)
        else:
            logger.error("Bundle %s failed with status %s", tx_hash, receipt.status)

        success_count = len(results) if succeeded else 0
        return BatchExecutionResult(
            results=tuple(results),
            total_time_ms=int((time.monotonic() - start) * 1000),
            total_fees=self.config.bundle_fee_estimate,
            success_count=success_count,
            failure_count=len(results) - success_count,
        )
