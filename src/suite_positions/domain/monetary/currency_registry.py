from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from bidict import bidict

from suite_positions.config import get_settings
from suite_positions.domain.monetary.currency_table import load_currency_table
from suite_positions.errors import DuplicateCurrencyError, UnknownCurrencyError

logger = logging.getLogger(__name__)

# Highest supported number of minor-unit digits
MAX_MINOR_UNIT_DIGITS = 18


def normalize_identifier(identifier: str) -> str:
    """Return $identifier in its canonical registry form (stripped, upper-case).

    Raises:
        TypeError: If $identifier is not a string.
        ValueError: If $identifier is empty.
    """
    # Raise: identifiers are symbolic strings
    if not isinstance(identifier, str):
        raise TypeError(f"Cannot call `normalize_identifier` because $identifier must be str (got type '{type(identifier).__name__}')")

    # Raise: identifier cannot be empty
    if not identifier.strip():
        raise ValueError(f"Cannot call `normalize_identifier` because $identifier must be a non-empty string, but provided value is: '{identifier}'")

    return identifier.strip().upper()


@dataclass(frozen=True)
class CurrencyRecord:
    """Immutable metadata of one currency.

    Attributes:
        identifier (str): Symbolic registry key (e.g., "USD").
        minor_unit_digits (int): Digits after the decimal point of the minor unit (typically 0, 2 or 3).
        iso_code (str): ISO 4217 alphabetic code.
        display_name (str): Human-readable currency name.
        numeric_code (int | None): ISO 4217 numeric code, if known.
    """

    identifier: str
    minor_unit_digits: int
    iso_code: str
    display_name: str
    numeric_code: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "identifier", normalize_identifier(self.identifier))

        # Raise: minor unit must be a plain int in the supported range
        if isinstance(self.minor_unit_digits, bool) or not isinstance(self.minor_unit_digits, int):
            raise TypeError(f"Cannot create `CurrencyRecord` because $minor_unit_digits must be int (got type '{type(self.minor_unit_digits).__name__}')")
        if not 0 <= self.minor_unit_digits <= MAX_MINOR_UNIT_DIGITS:
            raise ValueError(f"Cannot create `CurrencyRecord` because $minor_unit_digits ({self.minor_unit_digits}) is not between 0 and {MAX_MINOR_UNIT_DIGITS}")

        # Raise: ISO code is exactly 3 letters
        if not isinstance(self.iso_code, str) or len(self.iso_code.strip()) != 3 or not self.iso_code.strip().isalpha() or not self.iso_code.strip().isascii():
            raise ValueError(f"Cannot create `CurrencyRecord` because $iso_code must be 3 ASCII letters, but provided value is: '{self.iso_code}'")
        object.__setattr__(self, "iso_code", self.iso_code.strip().upper())

        # Raise: display name cannot be empty
        if not isinstance(self.display_name, str) or not self.display_name.strip():
            raise ValueError(f"Cannot create `CurrencyRecord` because $display_name must be a non-empty string, but provided value is: '{self.display_name}'")
        object.__setattr__(self, "display_name", self.display_name.strip())

        # Raise: numeric code is a 3-digit ISO number when given
        if self.numeric_code is not None:
            if isinstance(self.numeric_code, bool) or not isinstance(self.numeric_code, int) or not 0 <= self.numeric_code <= 999:
                raise ValueError(f"Cannot create `CurrencyRecord` because $numeric_code must be an int between 0 and 999, but provided value is: {self.numeric_code!r}")


class CurrencyRegistry:
    """Append-only table mapping currency identifiers to their `CurrencyRecord`.

    The registry also owns the cache of canonical currency handles, so a handle always
    resolves to a record of the registry that created it. Insertion and handle creation run
    under one lock (atomic check-then-insert); lookups read plain dicts without locking.

    Separate instances are fully isolated, which lets tests build their own registry
    instead of touching the process-wide one.
    """

    def __init__(self, rows: Optional[Iterable[Sequence[Any]]] = None):
        """Initialize the registry, optionally populating it from $rows.

        Args:
            rows: Optional sequence of `(identifier, minor_unit_digits, iso_code, display_name[, numeric_code])`.
        """
        self._lock = Lock()
        self._records: Dict[str, CurrencyRecord] = {}
        self._identifiers_by_numeric_code: bidict[int, str] = bidict()
        self._handles_by_identifier: bidict[str, Any] = bidict()
        self._instruments_by_handle: Dict[Any, Any] = {}

        if rows is not None:
            self.register_all(rows)

    # region Registration

    def register(
        self,
        identifier: str,
        minor_unit_digits: int,
        iso_code: str,
        display_name: str,
        numeric_code: Optional[int] = None,
    ) -> CurrencyRecord:
        """Register a currency, or return the existing record if it is already registered.

        Args:
            identifier: Symbolic currency code (e.g., "USD").
            minor_unit_digits: Number of digits of the minor unit.
            iso_code: ISO 4217 alphabetic code.
            display_name: Human-readable name.
            numeric_code: Optional ISO 4217 numeric code.

        Returns:
            CurrencyRecord: The registered record (the pre-existing one for idempotent calls).

        Raises:
            DuplicateCurrencyError: If $identifier (or $numeric_code) is already registered with different metadata.
        """
        record = CurrencyRecord(identifier, minor_unit_digits, iso_code, display_name, numeric_code)

        with self._lock:
            existing = self._records.get(record.identifier)
            if existing is not None:
                # Raise: two different records must never coexist under one identifier
                if existing != record:
                    raise DuplicateCurrencyError(record.identifier, existing, record)
                return existing

            if record.numeric_code is not None:
                owner = self._identifiers_by_numeric_code.get(record.numeric_code)
                # Raise: numeric code already belongs to another currency
                if owner is not None:
                    raise DuplicateCurrencyError(record.identifier, self._records[owner], record)
                self._identifiers_by_numeric_code[record.numeric_code] = record.identifier

            self._records[record.identifier] = record

        logger.debug(f"Registered currency {record.identifier} (minor unit digits: {record.minor_unit_digits})")
        return record

    def register_all(self, rows: Iterable[Sequence[Any]]) -> int:
        """Register every row of a currency dataset.

        Args:
            rows: Sequence of `(identifier, minor_unit_digits, iso_code, display_name[, numeric_code])`.

        Returns:
            int: Number of records that were newly inserted.
        """
        inserted = 0
        for row in rows:
            # Raise: each row must carry 4 or 5 fields
            if len(row) not in (4, 5):
                raise ValueError(f"Cannot call `register_all` because a row has {len(row)} fields, expected 4 or 5: {row!r}")

            before = len(self._records)
            self.register(*row)
            if len(self._records) > before:
                inserted += 1

        return inserted

    # endregion

    # region Lookup

    def lookup(self, identifier: str) -> CurrencyRecord:
        """Return the record for $identifier.

        Raises:
            UnknownCurrencyError: If $identifier is not registered.
        """
        key = normalize_identifier(identifier)
        record = self._records.get(key)
        if record is None:
            raise UnknownCurrencyError(key)
        return record

    def lookup_numeric(self, numeric_code: int) -> CurrencyRecord:
        """Return the record registered with ISO numeric code $numeric_code.

        Raises:
            UnknownCurrencyError: If no currency carries $numeric_code.
        """
        identifier = self._identifiers_by_numeric_code.get(numeric_code)
        if identifier is None:
            raise UnknownCurrencyError(numeric_code, f"No currency with numeric code {numeric_code} is registered")
        return self._records[identifier]

    def identifiers(self) -> List[str]:
        """Return registered identifiers in registration order."""
        return list(self._records.keys())

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, str) or not identifier.strip():
            return False
        return identifier.strip().upper() in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self.identifiers())

    # endregion

    # region Handles

    def intern_handle(self, identifier: str, factory: Callable[[CurrencyRecord], Any]) -> Any:
        """Return the canonical handle for $identifier, creating it with $factory on first use.

        Args:
            identifier: Registered currency identifier.
            factory: Called once with the record to build the handle.

        Returns:
            The cached handle; every call for the same identifier returns the same object.

        Raises:
            UnknownCurrencyError: If $identifier is not registered.
        """
        key = normalize_identifier(identifier)
        handle = self._handles_by_identifier.get(key)
        if handle is not None:
            return handle

        with self._lock:
            record = self._records.get(key)
            if record is None:
                raise UnknownCurrencyError(key)

            handle = self._handles_by_identifier.get(key)
            if handle is None:
                handle = factory(record)
                self._handles_by_identifier[key] = handle
                logger.debug(f"Created currency handle for {key}")

        return handle

    def owns_handle(self, handle: object) -> bool:
        """Return True if $handle is a canonical handle created by this registry."""
        return handle in self._handles_by_identifier.inverse

    def intern_instrument(self, handle: object, factory: Callable[[], Any]) -> Any:
        """Return the canonical instrument tag built on $handle, creating it with $factory on first use.

        Instrument tags live in the registry that owns their handle, so they are released
        together with the registry.

        Raises:
            ValueError: If $handle was not created by this registry.
        """
        instrument = self._instruments_by_handle.get(handle)
        if instrument is not None:
            return instrument

        with self._lock:
            # Raise: instruments are cached only by the registry that created their handle
            if handle not in self._handles_by_identifier.inverse:
                raise ValueError(f"Cannot call `intern_instrument` because $handle ({handle!r}) was not created by this registry")

            instrument = self._instruments_by_handle.get(handle)
            if instrument is None:
                instrument = factory()
                self._instruments_by_handle[handle] = instrument

        return instrument

    # endregion

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(currencies={len(self._records)})"


# region Default registry

_default_registry: Optional[CurrencyRegistry] = None
_default_registry_lock = Lock()


def initialize_default_registry(rows: Optional[Iterable[Sequence[Any]]] = None) -> CurrencyRegistry:
    """Initialize the process-wide registry (idempotent, thread-safe).

    On the first call the registry is populated from $rows when given, otherwise from the
    table configured by `SUITE_POSITIONS_CURRENCY_TABLE`, otherwise from the packaged
    ISO 4217 table. Later calls return the same registry; $rows passed on a later call are
    fed through `CurrencyRegistry.register`, so conflicting metadata still raises.

    Returns:
        CurrencyRegistry: The process-wide registry.
    """
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            if rows is None:
                rows = load_currency_table(get_settings().currency_table_path)

            registry = CurrencyRegistry(rows)
            _default_registry = registry
            logger.info(f"Initialized default currency registry with {len(registry)} currencies")
            return registry

    if rows is not None:
        _default_registry.register_all(rows)
    return _default_registry


def get_default_registry() -> CurrencyRegistry:
    """Return the process-wide registry, initializing it on first use."""
    registry = _default_registry
    if registry is None:
        registry = initialize_default_registry()
    return registry


def reset_default_registry() -> None:
    """Drop the process-wide registry; the next access initializes a fresh one."""
    global _default_registry
    with _default_registry_lock:
        _default_registry = None

# endregion
