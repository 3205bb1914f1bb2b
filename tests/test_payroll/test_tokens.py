"""Tests for the token registry and minor-unit conversion."""

from __future__ import annotations

import pytest

from app.services.payroll.tokens import lookup_token, to_minor_units, token_decimals
from conftest import make_config


def test_lookup_is_case_insensitive():
    info = lookup_token("0x20C0000000000000000000000000000000000001")
    assert info is not None
    assert info.symbol == "AlphaUSD"
    assert info.decimals == 6


def test_unknown_token_uses_configured_default():
    config = make_config(default_token_decimals=8)
    assert token_decimals("0x" + "1" * 40, config) == 8
    assert token_decimals("0x20c0000000000000000000000000000000000000", config) == 6


@pytest.mark.parametrize(
    "amount, decimals, expected",
    [
        ("1", 6, 1_000_000),
        ("1.5", 6, 1_500_000),
        ("0.000001", 6, 1),
        ("0.0000005", 6, 1),
        ("0.00000049", 6, 0),
        ("1500.00", 2, 150_000),
        (" 3 ", 0, 3),
    ],
)
def test_to_minor_units(amount, decimals, expected):
    assert to_minor_units(amount, decimals) == expected


@pytest.mark.parametrize(
    "amount", ["abc", "", "NaN", "Infinity", "100000000000000000000000", "1e20000000"]
)
def test_to_minor_units_rejects(amount):
    with pytest.raises(ValueError):
        to_minor_units(amount, 6)


def test_to_minor_units_reports_out_of_range_amount():
    with pytest.raises(ValueError, match="Amount out of range"):
        to_minor_units("100000000000000000000000", 6)
