"""Known Tempo testnet stablecoins and their on-chain metadata."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from app.core.config import Settings


@dataclass(frozen=True)
class TokenInfo:
    """Static metadata for a TIP-20 stablecoin."""

    symbol: str
    address: str
    decimals: int


TOKENS: dict[str, TokenInfo] = {
    info.address.lower(): info
    for info in (
        TokenInfo("pathUSD", "0x20c0000000000000000000000000000000000000", 6),
        TokenInfo("AlphaUSD", "0x20c0000000000000000000000000000000000001", 6),
        TokenInfo("BetaUSD", "0x20c0000000000000000000000000000000000002", 6),
        TokenInfo("ThetaUSD", "0x20c0000000000000000000000000000000000003", 6),
    )
}


def lookup_token(address: str) -> Optional[TokenInfo]:
    """Return metadata for a known token address (case-insensitive)."""
    return TOKENS.get((address or "").lower())


def token_decimals(address: str, config: Settings) -> int:
    """Decimals for ``address``, falling back to the configured default."""
    info = lookup_token(address)
    return info.decimals if info is not None else config.default_token_decimals


def to_minor_units(amount: str, decimals: int) -> int:
    """Convert a decimal string into integer minor units.

    ``"1.5"`` with 6 decimals becomes ``1500000``.  Digits beyond the
    token's precision are rounded half-up.

    Raises:
        ValueError: If ``amount`` is not a finite decimal number or has more
            digits than the decimal context can hold in minor units.
    """
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {amount!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Amount is not a finite number: {amount!r}")
    try:
        scaled = value.scaleb(decimals).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except ArithmeticError as exc:
        raise ValueError(f"Amount out of range: {amount!r}") from exc
    return int(scaled)
