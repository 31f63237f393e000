"""Named counterparts of the Position operators.

Each function validates the kinds of its operands before computing and raises `TypeError`
for combinations that have no meaning (e.g. multiplying two Positions). Instrument mismatches
raise `IncompatibleInstrumentError` exactly like the operators do.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from suite_positions.domain.instrument import FinancialInstrument
from suite_positions.domain.position import Position, PositionType, promote
from suite_positions.utils.numeric_tools import DecimalLike

__all__ = ["add", "subtract", "multiply", "divide", "zero", "one", "cash", "promote", "total"]


def _require_position(value: object, function_name: str, param: str) -> Position:
    # Raise: the operand must be a Position
    if not isinstance(value, Position):
        raise TypeError(f"Cannot call `{function_name}` because ${param} is not Position (got type '{type(value).__name__}')")
    return value


def add(p1: Position, p2: Position) -> Position:
    """Return `p1 + p2` for Positions of the same instrument."""
    _require_position(p1, "add", "p1")
    _require_position(p2, "add", "p2")
    return p1 + p2


def subtract(p1: Position, p2: Position) -> Position:
    """Return `p1 - p2` for Positions of the same instrument."""
    _require_position(p1, "subtract", "p1")
    _require_position(p2, "subtract", "p2")
    return p1 - p2


def multiply(x: DecimalLike | Position | FinancialInstrument, y: DecimalLike | Position | FinancialInstrument) -> Position:
    """Multiply a scalar by a Position or by an instrument.

    - scalar * Position (either order): Position scaled by the scalar, re-rounded to its scale.
    - scalar * instrument (either order): new Position of that instrument, same as `Position(instrument, scalar)`.

    Raises:
        TypeError: If both or neither operands are scalars.
    """
    x_is_value = isinstance(x, (Position, FinancialInstrument))
    y_is_value = isinstance(y, (Position, FinancialInstrument))

    # Raise: exactly one operand must be a scalar
    if x_is_value == y_is_value:
        raise TypeError(f"Cannot call `multiply` because exactly one operand must be a scalar (got '{type(x).__name__}' and '{type(y).__name__}')")

    scalar, target = (y, x) if x_is_value else (x, y)
    if isinstance(target, FinancialInstrument):
        return Position(target, scalar)
    return target * scalar


def divide(x: Position, y: Position | DecimalLike) -> Position | Decimal:
    """Divide a Position by a Position (dimensionless Decimal) or by a scalar (Position).

    Raises:
        IncompatibleInstrumentError: If both are Positions of different instruments.
        ZeroDivisionError: If the divisor is zero.
    """
    _require_position(x, "divide", "x")

    # Raise: an instrument is not a divisor
    if isinstance(y, FinancialInstrument):
        raise TypeError("Cannot call `divide` because $y is a FinancialInstrument; divide by a Position or a scalar")

    return x / y


def zero(position_type: PositionType) -> Position:
    """Return the additive identity Position of $position_type."""
    # Raise: neutral elements are defined per concrete representation
    if not isinstance(position_type, PositionType):
        raise TypeError(f"Cannot call `zero` because $position_type is not PositionType (got type '{type(position_type).__name__}')")
    return position_type.zero()


def one(position_type: PositionType) -> Position:
    """Return the multiplicative identity Position (amount 1) of $position_type."""
    # Raise: neutral elements are defined per concrete representation
    if not isinstance(position_type, PositionType):
        raise TypeError(f"Cannot call `one` because $position_type is not PositionType (got type '{type(position_type).__name__}')")
    return position_type.one()


def cash(position: Position) -> FinancialInstrument:
    """Return the instrument tag of $position."""
    return _require_position(position, "cash", "position").instrument


def total(positions: Iterable[Position], position_type: Optional[PositionType] = None) -> Position:
    """Sum $positions starting from the zero of $position_type.

    Args:
        positions: Positions of one instrument.
        position_type: Representation of the result's zero. Required when $positions is empty;
            otherwise defaults to the type of the first Position.

    Raises:
        ValueError: If $positions is empty and $position_type is None.
        IncompatibleInstrumentError: If the Positions hold different instruments.
    """
    iterator = iter(positions)
    if position_type is None:
        first = next(iterator, None)
        # Raise: an empty sum has no instrument to be denominated in
        if first is None:
            raise ValueError("Cannot call `total` because $positions is empty and $position_type is None")
        result = _require_position(first, "total", "positions")
    else:
        result = zero(position_type)

    for position in iterator:
        result = add(result, position)
    return result
