from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, Inexact, localcontext
from typing import Optional, Tuple

from suite_positions.config import get_settings
from suite_positions.domain.instrument import FinancialInstrument
from suite_positions.errors import AmountOverflowError, IncompatibleInstrumentError, PrecisionLossError
from suite_positions.utils.numeric_tools import (
    WORKING_PRECISION,
    DecimalLike,
    as_decimal,
    check_storage_bits,
    from_units,
    quantize_to_scale,
    signed_range,
    to_units,
)


def _to_units(value: Decimal, scale: int) -> int:
    """Convert $value to a scaled integer at $scale using the configured rounding rule."""
    settings = get_settings()
    quantized = quantize_to_scale(value, scale, settings.rounding)

    # Raise: strict precision mode refuses to drop fractional digits
    if settings.strict_precision and quantized != value:
        raise PrecisionLossError(value, scale)

    return to_units(quantized, scale)


@dataclass(frozen=True)
class PositionType:
    """Concrete representation of Positions: one instrument stored in one integer width.

    Used where generic numeric code needs neutral elements, e.g. as the start value
    when summing Positions. Without an explicit `storage_bits` the configured default width
    is used, the same one `Position(instrument, value)` picks.
    """

    instrument: FinancialInstrument
    storage_bits: Optional[int] = None

    def __post_init__(self) -> None:
        # Raise: $instrument must be a FinancialInstrument instance
        if not isinstance(self.instrument, FinancialInstrument):
            raise TypeError(f"Cannot create `PositionType` because $instrument is not FinancialInstrument (got type '{type(self.instrument).__name__}')")

        if self.storage_bits is None:
            object.__setattr__(self, "storage_bits", get_settings().default_storage_bits)
        check_storage_bits(self.storage_bits)

    @property
    def scale(self) -> int:
        return self.instrument.scale

    @property
    def min_units(self) -> int:
        return signed_range(self.storage_bits)[0]

    @property
    def max_units(self) -> int:
        return signed_range(self.storage_bits)[1]

    def zero(self) -> Position:
        """Return the additive identity of this representation."""
        return Position._from_units(self.instrument, 0, self.storage_bits)

    def one(self) -> Position:
        """Return the multiplicative identity (amount 1) of this representation."""
        return Position._from_units(self.instrument, 10**self.scale, self.storage_bits)

    def __str__(self) -> str:
        return f"Position[{self.instrument}, int{self.storage_bits}]"


class Position:
    """A quantity of one financial instrument.

    The amount is a fixed-point decimal: a signed integer of `storage_bits` bits holding
    `amount * 10^scale`, where `scale` always comes from the instrument. Positions are
    immutable; arithmetic returns new Positions.

    Only Positions of the same instrument can be added, subtracted, compared or divided by
    each other. Mixing instruments raises `IncompatibleInstrumentError`; there is no implicit
    currency conversion. When the two operands use different storage widths, both are promoted
    to the wider one before combining.

    Rounding: values with more fractional digits than the scale are rounded with the
    configured mode (banker's rounding, `ROUND_HALF_EVEN`, by default). In strict precision
    mode a `PrecisionLossError` is raised instead.

    Attributes:
        instrument (FinancialInstrument): What is held.
        amount (Decimal): Quantity held, with exactly `scale` fractional digits.
        units (int): Scaled integer backing the amount.
        storage_bits (int): Width of the signed integer storage.
    """

    __slots__ = ("_instrument", "_units", "_storage_bits")

    def __init__(self, instrument: FinancialInstrument, value: DecimalLike | Position, storage_bits: Optional[int] = None):
        """Initialize a Position of $instrument holding $value.

        Args:
            instrument: Instrument tag, e.g. `Cash("USD")`.
            value: Decimal-like scalar, or a Position of the same instrument to convert.
            storage_bits: Signed integer width for the amount (64 or 128). Defaults to
                the width of a converted Position, otherwise to the configured default (64).

        Raises:
            TypeError: If $instrument is not a FinancialInstrument, $value has an unsupported type or $storage_bits is not an int.
            ValueError: If $value cannot be parsed or is not finite, or $storage_bits is not 64 or 128.
            IncompatibleInstrumentError: If $value is a Position of another instrument.
            PrecisionLossError: In strict precision mode, if $value needs rounding.
            AmountOverflowError: If the scaled amount does not fit $storage_bits.
        """
        # Raise: Positions are always tagged with an instrument instance
        if not isinstance(instrument, FinancialInstrument):
            raise TypeError(f"Cannot create `Position` because $instrument is not FinancialInstrument (got type '{type(instrument).__name__}')")

        if isinstance(value, Position):
            # Raise: conversion never changes the instrument
            if value.instrument is not instrument:
                raise IncompatibleInstrumentError(value.instrument, instrument, "convert")
            units = value.units
            bits = storage_bits if storage_bits is not None else value.storage_bits
        else:
            units = _to_units(as_decimal(value), instrument.scale)
            bits = storage_bits if storage_bits is not None else get_settings().default_storage_bits

        self._init_fields(instrument, units, check_storage_bits(bits))

    @classmethod
    def _from_units(cls, instrument: FinancialInstrument, units: int, storage_bits: int) -> Position:
        position = cls.__new__(cls)
        position._init_fields(instrument, units, storage_bits)
        return position

    def _init_fields(self, instrument: FinancialInstrument, units: int, storage_bits: int) -> None:
        low, high = signed_range(storage_bits)
        # Raise: scaled amount must fit into the integer storage
        if not low <= units <= high:
            raise AmountOverflowError(units, storage_bits)

        self._instrument = instrument
        self._units = units
        self._storage_bits = storage_bits

    # region Properties

    @property
    def instrument(self) -> FinancialInstrument:
        """Get the instrument of this Position."""
        return self._instrument

    @property
    def cash(self) -> FinancialInstrument:
        """Get the instrument of this Position (same as `instrument`)."""
        return self._instrument

    @property
    def amount(self) -> Decimal:
        """Get the amount as a Decimal with exactly `scale` fractional digits."""
        return from_units(self._units, self._instrument.scale)

    @property
    def units(self) -> int:
        """Get the scaled integer (amount * 10^scale)."""
        return self._units

    @property
    def scale(self) -> int:
        return self._instrument.scale

    @property
    def storage_bits(self) -> int:
        return self._storage_bits

    @property
    def type(self) -> PositionType:
        """Get the concrete representation (instrument + storage width) of this Position."""
        return PositionType(self._instrument, self._storage_bits)

    # endregion

    # region Conversion

    def convert(self, storage_bits: int) -> Position:
        """Return this Position stored in $storage_bits bits.

        Raises:
            AmountOverflowError: If the amount does not fit the narrower storage.
        """
        if check_storage_bits(storage_bits) == self._storage_bits:
            return self
        return Position._from_units(self._instrument, self._units, storage_bits)

    def _check_same_instrument(self, other: Position, operation: str) -> None:
        """Check that both Positions hold the same instrument.

        Raises:
            IncompatibleInstrumentError: If the instruments differ.
        """
        if self._instrument is not other._instrument:
            raise IncompatibleInstrumentError(self._instrument, other._instrument, operation)

    def _scaled(self, factor: Decimal, divide: bool) -> Position:
        """Return this Position multiplied (or divided) by $factor, re-rounded to the scale.

        Raises:
            PrecisionLossError: In strict precision mode, if the result needs rounding, including
                rounding to the working precision before it reaches the instrument scale.
        """
        with localcontext() as ctx:
            ctx.prec = WORKING_PRECISION
            ctx.clear_flags()
            exact = self.amount / factor if divide else self.amount * factor
            inexact = ctx.flags[Inexact]

        # Raise: strict precision mode also refuses digits lost to the working precision
        if inexact and get_settings().strict_precision:
            raise PrecisionLossError(exact, self.scale)

        return Position._from_units(self._instrument, _to_units(exact, self.scale), self._storage_bits)

    # endregion

    # region Arithmetic

    def __add__(self, other):
        """Add two Positions of the same instrument."""
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_instrument(other, "add")
        return Position._from_units(self._instrument, self._units + other._units, max(self._storage_bits, other._storage_bits))

    def __sub__(self, other):
        """Subtract two Positions of the same instrument."""
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_instrument(other, "subtract")
        return Position._from_units(self._instrument, self._units - other._units, max(self._storage_bits, other._storage_bits))

    def __mul__(self, other):
        """Multiply by a scalar (Position * Position is not defined)."""
        if isinstance(other, (Position, FinancialInstrument)):
            return NotImplemented
        try:
            factor = as_decimal(other)
        except TypeError:
            return NotImplemented
        return self._scaled(factor, divide=False)

    def __rmul__(self, other):
        """Right multiplication: scalar * Position."""
        return self.__mul__(other)

    def __truediv__(self, other):
        """Divide by a scalar (returns Position) or by a Position of the same instrument (returns Decimal)."""
        if isinstance(other, Position):
            self._check_same_instrument(other, "divide")
            if other._units == 0:
                raise ZeroDivisionError("Cannot divide by a zero Position")
            # Same scale on both sides, so the ratio of scaled integers is the ratio of amounts
            return Decimal(self._units) / Decimal(other._units)

        try:
            divisor = as_decimal(other)
        except TypeError:
            return NotImplemented
        if divisor == 0:
            raise ZeroDivisionError("Cannot divide Position by zero")
        return self._scaled(divisor, divide=True)

    def __rtruediv__(self, other):
        """Right division: scalar / Position (not supported)."""
        return NotImplemented

    def __neg__(self) -> Position:
        return Position._from_units(self._instrument, -self._units, self._storage_bits)

    def __pos__(self) -> Position:
        return self

    def __abs__(self) -> Position:
        return Position._from_units(self._instrument, abs(self._units), self._storage_bits)

    # endregion

    # region Comparison

    def __eq__(self, other) -> bool:
        """Positions are equal when instrument and amount match; storage width is ignored."""
        if not isinstance(other, Position):
            return False
        return self._instrument is other._instrument and self._units == other._units

    def __lt__(self, other) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_instrument(other, "compare")
        return self._units < other._units

    def __le__(self, other) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_instrument(other, "compare")
        return self._units <= other._units

    def __gt__(self, other) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_instrument(other, "compare")
        return self._units > other._units

    def __ge__(self, other) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_instrument(other, "compare")
        return self._units >= other._units

    def __hash__(self) -> int:
        return hash((self._instrument, self._units))

    def __bool__(self) -> bool:
        return self._units != 0

    # endregion

    # region String representations

    def __str__(self) -> str:
        """Return string like '15.00USD'."""
        return f"{self.amount}{self._instrument.symbol}"

    def __repr__(self) -> str:
        """Return string like 'Position(Cash(USD), 15.00)'."""
        return f"{self.__class__.__name__}({self._instrument!r}, {self.amount})"

    # endregion


def promote(p1: Position, p2: Position) -> Tuple[Position, Position]:
    """Convert two Positions of the same instrument to their common (wider) storage.

    Raises:
        TypeError: If either argument is not a Position.
        IncompatibleInstrumentError: If the instruments differ.
    """
    # Raise: promotion only applies to Positions
    if not isinstance(p1, Position) or not isinstance(p2, Position):
        raise TypeError(f"Cannot call `promote` because both arguments must be Position (got '{type(p1).__name__}' and '{type(p2).__name__}')")

    p1._check_same_instrument(p2, "promote")
    bits = max(p1.storage_bits, p2.storage_bits)
    return p1.convert(bits), p2.convert(bits)
