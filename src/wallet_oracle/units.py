from __future__ import annotations

from decimal import Decimal, InvalidOperation


def from_base_units(value: int | str | Decimal, decimals: int) -> float:
    """Scale an integer amount of base units down to human units.

    Args:
        value: Amount expressed in the asset's smallest unit (satoshi, wei,
            lamport, lovelace). Strings are parsed as base-10 integers.
        decimals: Decimal exponent of the asset.

    Returns:
        The amount in whole-asset units.

    Notes:
        - Scaling happens on ``Decimal`` so 18-decimal wei amounts keep their
          precision until the final float conversion.
        - Negative amounts are rejected; a balance can never be below zero.
    """
    try:
        amount = Decimal(value) if not isinstance(value, Decimal) else value
    except InvalidOperation as e:
        raise ValueError(f"Invalid base-unit amount: {value!r}") from e
    if not amount.is_finite() or amount != amount.to_integral_value():
        raise ValueError(f"Base-unit amount must be integral, got {value!r}")
    if amount < 0:
        raise ValueError(f"Base-unit amount must be non-negative, got {value!r}")
    return float(amount.scaleb(-decimals))


def hex_to_int(value: str) -> int:
    """Parse a 0x-prefixed JSON-RPC quantity."""
    if not isinstance(value, str) or not value.startswith(("0x", "0X")):
        raise ValueError(f"Expected 0x-prefixed hex quantity, got {value!r}")
    return int(value, 16)
