"""Validation rules for payroll payment instructions.

Each ``check_*`` function inspects an instruction (plus, where relevant,
the available balance) and returns the issues it found.  They are pure: no
I/O, no mutation, so they can be unit-tested with plain objects.

Errors describe what would make on-chain execution fail or overspend and
block the batch.  Warnings are recommendations the user may proceed past.
"""

from __future__ import annotations

from decimal import Decimal, Overflow, localcontext

from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.schemas.instruction import PaymentInstruction
from app.schemas.validation import ValidationError, ValidationResult, ValidationWarning
from app.services.ingestion.normalizer import normalize_address, parse_decimal

logger = get_logger(__name__)


# ── Error rules ─────────────────────────────────────────────────────


def check_has_payments(instruction: PaymentInstruction) -> list[ValidationError]:
    """At least one payment is required, whatever the balance."""
    if instruction.payments:
        return []
    return [
        ValidationError(
            code="NO_PAYMENTS",
            message="At least one payment is required",
        )
    ]


def total_amount(instruction: PaymentInstruction) -> Decimal:
    """Sum of all payment amounts.

    Unparseable amounts count as zero here; they are reported separately
    by the INVALID_AMOUNT warning.
    """
    with localcontext() as ctx:
        # A total past the context limit saturates to Infinity
        ctx.traps[Overflow] = False
        return sum(
            (parse_decimal(p.amount) or Decimal(0) for p in instruction.payments),
            Decimal(0),
        )


def check_balance(
    instruction: PaymentInstruction,
    available_balance: str,
) -> list[ValidationError]:
    """The batch total must not exceed the available balance.

    A total exactly equal to the balance is allowed.
    """
    needed = total_amount(instruction)
    balance = parse_decimal(available_balance)
    if balance is None:
        logger.warning("Unparseable available balance %r, treating as 0", available_balance)
        balance = Decimal(0)

    if needed <= balance:
        return []
    return [
        ValidationError(
            code="INSUFFICIENT_BALANCE",
            message=f"Insufficient balance: need {needed:.2f}, have {balance:.2f}",
        )
    ]


# ── Warning rules ───────────────────────────────────────────────────


def check_duplicate_addresses(
    instruction: PaymentInstruction,
) -> list[ValidationWarning]:
    """Warn once per repeat payment to an address already seen.

    Paying the same wallet twice may be intentional (bonus + salary), so
    this is never an error.
    """
    seen: set[str] = set()
    warnings: list[ValidationWarning] = []
    for payment in instruction.payments:
        address = str(payment.employee.address or "").strip()
        key = normalize_address(address)
        if key in seen:
            warnings.append(
                ValidationWarning(
                    code="DUPLICATE_ADDRESS",
                    message=f"Duplicate payment to address {address}",
                    payment_id=payment.id,
                )
            )
        seen.add(key)
    return warnings


def check_amounts(
    instruction: PaymentInstruction,
    config: Settings,
) -> list[ValidationWarning]:
    """Flag invalid, unusually large and unusually small amounts.

    The three checks are independent range tests, so an amount of ``0``
    is reported both as INVALID_AMOUNT and SMALL_AMOUNT.
    """
    large = Decimal(str(config.large_amount_threshold))
    small = Decimal(str(config.small_amount_threshold))

    warnings: list[ValidationWarning] = []
    for payment in instruction.payments:
        amount = parse_decimal(payment.amount)

        if amount is None or amount <= 0:
            warnings.append(
                ValidationWarning(
                    code="INVALID_AMOUNT",
                    message=f"Invalid amount: {payment.amount}",
                    payment_id=payment.id,
                )
            )
        if amount is None:
            continue

        if amount > large:
            warnings.append(
                ValidationWarning(
                    code="LARGE_AMOUNT",
                    message=f"Unusually large payment amount: {payment.amount}",
                    payment_id=payment.id,
                )
            )
        if amount < small:
            warnings.append(
                ValidationWarning(
                    code="SMALL_AMOUNT",
                    message=f"Unusually small payment amount: {payment.amount}",
                    payment_id=payment.id,
                )
            )
    return warnings


def check_memos(instruction: PaymentInstruction) -> list[ValidationWarning]:
    """Recommend a memo on every payment for reconciliation."""
    return [
        ValidationWarning(
            code="MISSING_MEMO",
            message="Payment memo is recommended for tracking",
            payment_id=payment.id,
        )
        for payment in instruction.payments
        if not payment.memo
    ]


# ── Entry point ─────────────────────────────────────────────────────


def validate_instruction(
    instruction: PaymentInstruction,
    available_balance: str,
    config: Settings = settings,
) -> ValidationResult:
    """Run every rule and fold the issues into a ValidationResult.

    Args:
        instruction: The parsed batch; never modified.
        available_balance: Spendable balance of the payment token, as a
            decimal string.
        config: Settings carrying the amount thresholds.

    Returns:
        ``valid`` is True iff no errors were found; warnings never affect it.
    """
    errors = check_has_payments(instruction) + check_balance(
        instruction, available_balance
    )
    warnings = (
        check_duplicate_addresses(instruction)
        + check_amounts(instruction, config)
        + check_memos(instruction)
    )

    logger.info(
        "Validated %s: payments=%d errors=%d warnings=%d",
        instruction.message_id,
        len(instruction.payments),
        len(errors),
        len(warnings),
    )
    return ValidationResult(
        valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
    )
