"""Fixed-point health factor arithmetic over unsigned 128-bit integers.

All operations are integer-only and truncate toward zero. Multiplications go
through :func:`checked_mul` so a result that would wrap in a 128-bit register
raises instead of producing a plausible but wrong value.
"""

from __future__ import annotations

from .codec import U128_MAX
from .errors import ArithmeticOverflowError

LIQUIDATION_THRESHOLD = 50
LIQUIDATION_PRECISION = 100
PRECISION = 10**18


def _require_u128(value: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U128_MAX:
        raise ArithmeticOverflowError(f"{name} is not a u128 value: {value!r}")


def checked_mul(a: int, b: int) -> int:
    _require_u128(a, "lhs")
    _require_u128(b, "rhs")
    product = a * b
    if product > U128_MAX:
        raise ArithmeticOverflowError(f"u128 multiplication overflow: {a} * {b}")
    return product


def checked_div(a: int, b: int) -> int:
    _require_u128(a, "dividend")
    _require_u128(b, "divisor")
    if b == 0:
        raise ZeroDivisionError("u128 division by zero")
    return a // b


def adjusted_collateral(collateral_value_usd: int) -> int:
    return checked_div(checked_mul(collateral_value_usd, LIQUIDATION_THRESHOLD), LIQUIDATION_PRECISION)


def compute_health_factor(total_minted: int, collateral_value_usd: int) -> int:
    """Return the health factor scaled by ``PRECISION``.

    Zero debt maps to ``U128_MAX`` rather than dividing by zero.
    """
    _require_u128(total_minted, "total_minted")
    _require_u128(collateral_value_usd, "collateral_value_usd")
    if total_minted == 0:
        return U128_MAX
    collateral = adjusted_collateral(collateral_value_usd)
    return checked_div(checked_mul(collateral, PRECISION), total_minted)
