"""Parsing and validation of the health factor witness."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .codec import U128_MAX, u128_to_words, words_to_bytes
from .errors import InputError

_DECIMAL = re.compile(r"\+?[0-9]+", re.ASCII)
_U128_DIGITS = len(str(U128_MAX))


def parse_u128(text: str, field_name: str) -> int:
    if not isinstance(text, str):
        raise InputError(f"{field_name} must be decimal text, got {type(text).__name__}")
    stripped = text.strip()
    if not _DECIMAL.fullmatch(stripped):
        raise InputError(f"{field_name} is not an unsigned decimal integer: {text!r}")
    digits = stripped.lstrip("+").lstrip("0") or "0"
    # Length check first: int() refuses very long digit strings.
    if len(digits) > _U128_DIGITS or int(digits) > U128_MAX:
        raise InputError(f"{field_name} exceeds the u128 range: {stripped}")
    return int(digits)


@dataclass(frozen=True, slots=True)
class HealthFactorInput:
    total_minted: int
    collateral_value_usd: int

    def __post_init__(self) -> None:
        for name in ("total_minted", "collateral_value_usd"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InputError(f"{name} must be an integer, got {type(value).__name__}")
            if not 0 <= value <= U128_MAX:
                raise InputError(f"{name} is outside the u128 range: {value}")

    @classmethod
    def from_text(cls, total_minted: str, collateral_value_usd: str) -> "HealthFactorInput":
        return cls(
            total_minted=parse_u128(total_minted, "total_minted"),
            collateral_value_usd=parse_u128(collateral_value_usd, "collateral_value_usd"),
        )

    def to_bytes(self) -> bytes:
        # Read back by the guest in this order.
        return words_to_bytes(u128_to_words(self.total_minted) + u128_to_words(self.collateral_value_usd))
