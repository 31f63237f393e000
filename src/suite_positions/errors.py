"""Exceptions raised by the positions package.

All errors are synchronous and local: callers either receive a valid value or one of the
errors below describing exactly which rule was violated.
"""

from __future__ import annotations

from typing import Any


class PositionsError(Exception):
    """Base exception for all errors raised by this package."""

    pass


class UnknownCurrencyError(PositionsError, LookupError):
    """Raised when a currency identifier is not present in the registry."""

    def __init__(self, identifier: Any, message: str | None = None):
        self.identifier = identifier
        super().__init__(message or f"Currency with identifier '{identifier}' is not registered")


class DuplicateCurrencyError(PositionsError, ValueError):
    """Raised when registering an identifier that already exists with different metadata."""

    def __init__(self, identifier: str, existing: Any, rejected: Any):
        self.identifier = identifier
        self.existing = existing
        self.rejected = rejected
        super().__init__(f"Cannot register currency '{identifier}' because it is already registered as {existing!r}, which conflicts with {rejected!r}")


class IncompatibleInstrumentError(PositionsError, ValueError):
    """Raised when Positions of different financial instruments are combined."""

    def __init__(self, left: Any, right: Any, operation: str):
        self.left = left
        self.right = right
        self.operation = operation
        super().__init__(f"Cannot {operation} Positions of different financial instruments {left} and {right}")


class PrecisionLossError(PositionsError, ArithmeticError):
    """Raised in strict precision mode when a value has more fractional digits than the scale allows."""

    def __init__(self, value: Any, scale: int):
        self.value = value
        self.scale = scale
        super().__init__(f"Value {value} cannot be represented with {scale} decimal place(s) without rounding")


class AmountOverflowError(PositionsError, OverflowError):
    """Raised when a scaled amount does not fit the signed integer storage of a Position."""

    def __init__(self, units: int, storage_bits: int):
        self.units = units
        self.storage_bits = storage_bits
        super().__init__(f"Scaled amount {units} does not fit into signed {storage_bits}-bit storage")
