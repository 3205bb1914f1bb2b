"""Unit tests for the payroll validation rules.

All tests are pure: no database, no I/O.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from app.services.payroll.validator import (
    check_amounts,
    check_balance,
    check_duplicate_addresses,
    check_has_payments,
    check_memos,
    total_amount,
    validate_instruction,
)
from conftest import make_address, make_config, make_instruction, make_payment


def _codes(issues) -> list[str]:
    return [issue.code for issue in issues]


# ── Errors ───────────────────────────────────────────────────────────


class TestNoPayments:
    def test_empty_instruction_is_invalid(self):
        result = validate_instruction(make_instruction(), "1000000")
        assert not result.valid
        assert _codes(result.errors) == ["NO_PAYMENTS"]
        assert result.errors[0].message == "At least one payment is required"

    def test_non_empty_passes(self):
        assert check_has_payments(make_instruction([make_payment()])) == []


class TestBalance:
    def test_total_equal_to_balance_is_allowed(self):
        instruction = make_instruction(
            [make_payment(1, amount="600.00"), make_payment(2, amount="400.00")]
        )
        assert check_balance(instruction, "1000.00") == []

    def test_total_above_balance(self):
        instruction = make_instruction(
            [make_payment(1, amount="600.00"), make_payment(2, amount="400.01")]
        )
        errors = check_balance(instruction, "1000")
        assert _codes(errors) == ["INSUFFICIENT_BALANCE"]
        assert errors[0].message == "Insufficient balance: need 1000.01, have 1000.00"

    def test_unparseable_amounts_count_as_zero(self):
        instruction = make_instruction(
            [make_payment(1, amount="abc"), make_payment(2, amount="5")]
        )
        assert total_amount(instruction) == Decimal("5")
        assert check_balance(instruction, "5") == []

    def test_out_of_range_amount_counts_as_zero(self):
        instruction = make_instruction(
            [make_payment(1, amount="1e20000000"), make_payment(2, amount="5")]
        )
        assert total_amount(instruction) == Decimal("5")
        result = validate_instruction(instruction, "5")
        assert result.valid
        assert "INVALID_AMOUNT" in _codes(result.warnings)

    def test_total_past_decimal_limits_is_insufficient(self):
        instruction = make_instruction(
            [make_payment(1, amount="9e999999"), make_payment(2, amount="9e999999")]
        )
        assert _codes(check_balance(instruction, "1000")) == ["INSUFFICIENT_BALANCE"]

    def test_unparseable_balance_counts_as_zero(self):
        instruction = make_instruction([make_payment(1, amount="1")])
        assert _codes(check_balance(instruction, "lots")) == ["INSUFFICIENT_BALANCE"]

    def test_decimal_sum_is_exact(self):
        instruction = make_instruction(
            [make_payment(1, amount="0.1"), make_payment(2, amount="0.2")]
        )
        assert check_balance(instruction, "0.3") == []


# ── Warnings ─────────────────────────────────────────────────────────


class TestDuplicateAddresses:
    def test_repeat_is_flagged_once_per_repeat(self):
        address = make_address(7)
        payments = [
            make_payment(1),
            make_payment(2, employee={"address": address}),
            make_payment(3, employee={"address": address.upper().replace("0X", "0x")}),
            make_payment(4, employee={"address": address}),
        ]
        warnings = check_duplicate_addresses(make_instruction(payments))
        assert _codes(warnings) == ["DUPLICATE_ADDRESS", "DUPLICATE_ADDRESS"]
        assert [w.payment_id for w in warnings] == ["EMP-003", "EMP-004"]

    def test_message_names_the_address(self):
        address = make_address(9)
        payments = [
            make_payment(1, employee={"address": address}),
            make_payment(2, employee={"address": address}),
        ]
        warning = check_duplicate_addresses(make_instruction(payments))[0]
        assert warning.message == f"Duplicate payment to address {address}"

    def test_duplicates_do_not_invalidate(self):
        payments = [make_payment(1), make_payment(2, employee={"address": make_address(1)})]
        result = validate_instruction(make_instruction(payments), "1000")
        assert result.valid
        assert "DUPLICATE_ADDRESS" in _codes(result.warnings)


class TestAmounts:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            ("0", ["INVALID_AMOUNT", "SMALL_AMOUNT"]),
            ("-5", ["INVALID_AMOUNT", "SMALL_AMOUNT"]),
            ("abc", ["INVALID_AMOUNT"]),
            ("", ["INVALID_AMOUNT"]),
            ("1e20000000", ["INVALID_AMOUNT"]),
            ("0.5", ["SMALL_AMOUNT"]),
            ("1", []),
            ("100000", []),
            ("100000.01", ["LARGE_AMOUNT"]),
        ],
    )
    def test_amount_ranges(self, amount: str, expected: list[str]):
        instruction = make_instruction([make_payment(1, amount=amount)])
        assert _codes(check_amounts(instruction, make_config())) == expected

    def test_thresholds_come_from_config(self):
        config = make_config(large_amount_threshold=50.0, small_amount_threshold=10.0)
        instruction = make_instruction(
            [make_payment(1, amount="60"), make_payment(2, amount="5")]
        )
        warnings = check_amounts(instruction, config)
        assert [(w.code, w.payment_id) for w in warnings] == [
            ("LARGE_AMOUNT", "EMP-001"),
            ("SMALL_AMOUNT", "EMP-002"),
        ]


class TestMemos:
    @pytest.mark.parametrize("memo", [None, ""])
    def test_missing_memo(self, memo):
        instruction = make_instruction([make_payment(1, memo=memo)])
        warnings = check_memos(instruction)
        assert _codes(warnings) == ["MISSING_MEMO"]
        assert warnings[0].payment_id == "EMP-001"

    def test_memo_present(self):
        assert check_memos(make_instruction([make_payment(1)])) == []


# ── Entry point ──────────────────────────────────────────────────────


class TestValidateInstruction:
    def test_clean_batch(self):
        instruction = make_instruction([make_payment(n) for n in range(1, 4)])
        result = validate_instruction(instruction, "300")
        assert result.valid
        assert result.errors == ()
        assert result.warnings == ()

    def test_warnings_never_affect_validity(self):
        instruction = make_instruction(
            [make_payment(1, amount="0.5", memo=None), make_payment(2, amount="200000")]
        )
        result = validate_instruction(instruction, "1000000")
        assert result.valid
        assert set(_codes(result.warnings)) == {"SMALL_AMOUNT", "MISSING_MEMO", "LARGE_AMOUNT"}

    def test_instruction_is_not_modified(self):
        instruction = make_instruction([make_payment(1, amount="abc")])
        before = instruction.model_dump()
        validate_instruction(instruction, "0")
        assert instruction.model_dump() == before
