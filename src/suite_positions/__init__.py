__version__ = "0.1.0"

from suite_positions.domain.instrument import Cash, FinancialInstrument
from suite_positions.domain.monetary.currency import Currency
from suite_positions.domain.monetary.currency_registry import (
    CurrencyRecord,
    CurrencyRegistry,
    get_default_registry,
    initialize_default_registry,
)
from suite_positions.domain.position import Position, PositionType
from suite_positions.errors import (
    AmountOverflowError,
    DuplicateCurrencyError,
    IncompatibleInstrumentError,
    PositionsError,
    PrecisionLossError,
    UnknownCurrencyError,
)
from suite_positions.operations import add, cash, divide, multiply, one, promote, subtract, total, zero

__all__ = [
    "Cash",
    "FinancialInstrument",
    "Currency",
    "CurrencyRecord",
    "CurrencyRegistry",
    "get_default_registry",
    "initialize_default_registry",
    "Position",
    "PositionType",
    "PositionsError",
    "UnknownCurrencyError",
    "DuplicateCurrencyError",
    "IncompatibleInstrumentError",
    "PrecisionLossError",
    "AmountOverflowError",
    "add",
    "subtract",
    "multiply",
    "divide",
    "zero",
    "one",
    "cash",
    "promote",
    "total",
]
