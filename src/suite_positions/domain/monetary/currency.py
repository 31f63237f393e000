from __future__ import annotations

from typing import Optional

from suite_positions.domain.monetary.currency_registry import CurrencyRecord, CurrencyRegistry, get_default_registry


class Currency:
    """Canonical handle standing for "denominated in this currency".

    There is exactly one handle per identifier and registry: `Currency("USD")`,
    `Currency.of("USD")` and `Currency.of(" usd ")` all return the same object. The handle
    carries no amount; its metadata is read from the registry record.

    Attributes:
        identifier (str): Symbolic currency code (e.g., "USD").
        unit (int): Number of minor-unit digits.
        code (str): ISO 4217 alphabetic code.
        name (str): Human-readable currency name.
    """

    __slots__ = ("_record", "_registry")

    def __new__(cls, identifier: str, registry: Optional[CurrencyRegistry] = None) -> Currency:
        return cls.of(identifier, registry)

    @classmethod
    def of(cls, identifier: str, registry: Optional[CurrencyRegistry] = None) -> Currency:
        """Return the canonical handle for $identifier.

        Args:
            identifier: Registered currency identifier (case-insensitive).
            registry: Registry to resolve against; defaults to the process-wide registry.

        Returns:
            Currency: The same handle object for every call with the same identifier.

        Raises:
            UnknownCurrencyError: If $identifier is not registered.
        """
        registry = registry if registry is not None else get_default_registry()
        return registry.intern_handle(identifier, lambda record: cls._create(record, registry))

    @classmethod
    def _create(cls, record: CurrencyRecord, registry: CurrencyRegistry) -> Currency:
        handle = object.__new__(cls)
        handle._record = record
        handle._registry = registry
        return handle

    @property
    def identifier(self) -> str:
        """Get the currency identifier."""
        return self._record.identifier

    @property
    def currency(self) -> str:
        """Get the currency identifier (same as `identifier`)."""
        return self._record.identifier

    @property
    def unit(self) -> int:
        """Get the number of minor-unit digits."""
        return self._record.minor_unit_digits

    @property
    def code(self) -> str:
        """Get the ISO 4217 alphabetic code."""
        return self._record.iso_code

    @property
    def name(self) -> str:
        """Get the currency display name."""
        return self._record.display_name

    @property
    def numeric_code(self) -> Optional[int]:
        """Get the ISO 4217 numeric code, if known."""
        return self._record.numeric_code

    @property
    def record(self) -> CurrencyRecord:
        return self._record

    @property
    def registry(self) -> CurrencyRegistry:
        return self._registry

    def __reduce__(self):
        # Unpickling resolves through the default registry, yielding its canonical handle
        return Currency.of, (self.identifier,)

    def __copy__(self) -> Currency:
        return self

    def __deepcopy__(self, memo) -> Currency:
        return self

    def __str__(self) -> str:
        return self.identifier

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.identifier}')"
