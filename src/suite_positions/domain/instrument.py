from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from suite_positions.domain.monetary.currency import Currency
from suite_positions.domain.monetary.currency_registry import CurrencyRegistry
from suite_positions.utils.numeric_tools import DecimalLike

if TYPE_CHECKING:
    from suite_positions.domain.position import Position


class FinancialInstrument(ABC):
    """Tag for *what* a Position holds (cash in a currency, and later equities or others).

    Instruments carry no amount. Each concrete instrument defines the decimal scale its
    amounts are stored at and a compact symbol used when displaying Positions.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def scale(self) -> int:
        """Number of digits after the decimal point for amounts of this instrument."""
        ...

    @property
    @abstractmethod
    def symbol(self) -> str:
        """Compact text form of this instrument (e.g., "USD")."""
        ...

    def __rmul__(self, value: DecimalLike) -> Position:
        """Build a Position from a scalar, so that `5 * usd` equals `Position(usd, 5)`."""
        # Position imports this module, so it is resolved at call time
        from suite_positions.domain.position import Position

        if isinstance(value, (Position, FinancialInstrument)):
            return NotImplemented
        return Position(self, value)

    def __mul__(self, value: DecimalLike) -> Position:
        return self.__rmul__(value)


class Cash(FinancialInstrument):
    """Cash held in one currency.

    The scale of cash amounts always equals the minor-unit digits of the currency, e.g. 2 for
    USD and 0 for JPY; it cannot be chosen by the caller. There is one canonical Cash tag
    per currency handle, so `Cash("USD") is Cash(Currency.of("USD"))`. The canonical tag is
    cached by the registry that owns the handle.
    """

    __slots__ = ("_currency",)

    def __new__(cls, currency: Currency | str, registry: Optional[CurrencyRegistry] = None) -> Cash:
        """Return the canonical Cash tag for $currency.

        Args:
            currency: A `Currency` handle, or an identifier string resolved with `Currency.of`.
            registry: Registry used to resolve an identifier string; ignored for handles.

        Raises:
            TypeError: If $currency is neither `Currency` nor str.
            UnknownCurrencyError: If an identifier string is not registered.
        """
        if isinstance(currency, str):
            currency = Currency.of(currency, registry)

        # Raise: Cash is only defined for currency handles
        if not isinstance(currency, Currency):
            raise TypeError(f"Cannot create `Cash` because $currency must be Currency or str (got type '{type(currency).__name__}')")

        return currency.registry.intern_instrument(currency, lambda: cls._create(currency))

    @classmethod
    def _create(cls, currency: Currency) -> Cash:
        instance = object.__new__(cls)
        instance._currency = currency
        return instance

    @property
    def currency(self) -> Currency:
        """Get the currency handle of this cash instrument."""
        return self._currency

    @property
    def identifier(self) -> str:
        """Get the currency identifier."""
        return self._currency.identifier

    @property
    def unit(self) -> int:
        """Get the number of minor-unit digits (equal to `scale`)."""
        return self._currency.unit

    @property
    def code(self) -> str:
        """Get the ISO 4217 alphabetic code."""
        return self._currency.code

    @property
    def name(self) -> str:
        """Get the currency display name."""
        return self._currency.name

    @property
    def scale(self) -> int:
        return self._currency.unit

    @property
    def symbol(self) -> str:
        return self._currency.identifier

    def __reduce__(self):
        return Cash, (self._currency,)

    def __copy__(self) -> Cash:
        return self

    def __deepcopy__(self, memo) -> Cash:
        return self

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.symbol})"
