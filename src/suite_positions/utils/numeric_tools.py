from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import TypeAlias

# Use where optimal type is `Decimal`, but other types are also acceptable (and will be converted to `Decimal`)
DecimalLike: TypeAlias = Decimal | int | str | float

# Signed integer widths a fixed-point amount can be stored in (at least 64 bits)
STORAGE_BITS: tuple[int, ...] = (64, 128)

# Working precision for intermediate results; wide enough for any 128-bit scaled amount times a scalar
WORKING_PRECISION = 80


def as_decimal(value: DecimalLike) -> Decimal:
    """Converts input to `Decimal` safely.

    Ensures floats are converted via string to avoid precision noise.

    Args:
        value: Input value as `DecimalLike`.

    Returns:
        Value converted to `Decimal`.

    Raises:
        TypeError: If $value is a bool or not a supported scalar type.
        ValueError: If $value cannot be parsed or is not finite.
    """
    # Raise: bool is an int subclass, but True/False are never amounts
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, str, float)):
        raise TypeError(f"Cannot call `as_decimal` because $value has unsupported type '{type(value).__name__}'")

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Cannot call `as_decimal` because $value ('{value}') cannot be converted to Decimal") from e

    # Raise: NaN and infinities have no fixed-point representation
    if not result.is_finite():
        raise ValueError(f"Cannot call `as_decimal` because $value ('{value}') is not finite")

    return result


def check_storage_bits(storage_bits: int) -> int:
    """Return $storage_bits if it is a supported signed integer width.

    Raises:
        TypeError: If $storage_bits is not an int (bool and float included).
        ValueError: If $storage_bits is not one of STORAGE_BITS.
    """
    # Raise: widths are plain ints, so 64.0 or True are rejected before the membership test
    if type(storage_bits) is not int:
        raise TypeError(f"Cannot use $storage_bits ({storage_bits!r}) because it must be int (got type '{type(storage_bits).__name__}')")

    # Raise: only the widths in STORAGE_BITS can back an amount
    if storage_bits not in STORAGE_BITS:
        raise ValueError(f"Cannot use $storage_bits ({storage_bits}) because it is not one of {STORAGE_BITS}")

    return storage_bits


def signed_range(storage_bits: int) -> tuple[int, int]:
    """Return the inclusive (min, max) range of a signed integer with $storage_bits bits."""
    check_storage_bits(storage_bits)

    limit = 1 << (storage_bits - 1)
    return -limit, limit - 1


def quantize_to_scale(value: Decimal, scale: int, rounding: str) -> Decimal:
    """Return $value rounded to exactly $scale fractional digits using $rounding."""
    with localcontext() as ctx:
        ctx.prec = max(WORKING_PRECISION, value.adjusted() + scale + 2)
        return value.quantize(Decimal(1).scaleb(-scale), rounding=rounding)


def to_units(quantized: Decimal, scale: int) -> int:
    """Return the scaled integer (value * 10^scale) of a Decimal already quantized to $scale."""
    sign, digits, exponent = quantized.as_tuple()
    # Raise: caller must quantize first, otherwise the integer would be at the wrong scale
    if exponent != -scale:
        raise ValueError(f"Cannot call `to_units` because $quantized ('{quantized}') is not at scale {scale}")

    units = int("".join(str(d) for d in digits)) if digits else 0
    return -units if sign else units


def from_units(units: int, scale: int) -> Decimal:
    """Return the exact Decimal with $scale fractional digits represented by scaled integer $units."""
    # String construction is exact and keeps trailing zeros (e.g. 1500, 2 -> 15.00)
    return Decimal(f"{units}E-{scale}")
