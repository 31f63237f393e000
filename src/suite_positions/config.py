"""Runtime settings read from the environment (and an optional `.env` file).

Recognized variables:

- `SUITE_POSITIONS_CURRENCY_TABLE`: path to a currency CSV used instead of the packaged ISO 4217 table.
- `SUITE_POSITIONS_ROUNDING`: name of a `decimal` rounding mode (default `ROUND_HALF_EVEN`).
- `SUITE_POSITIONS_STRICT_PRECISION`: when true, excess fractional digits raise `PrecisionLossError`
  instead of being rounded.
- `SUITE_POSITIONS_STORAGE_BITS`: default signed integer width for Position amounts, 64 or 128 (default 64).
"""

from __future__ import annotations

import decimal
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from suite_positions.utils.numeric_tools import check_storage_bits

logger = logging.getLogger(__name__)

ROUNDING_MODES = frozenset(
    {
        decimal.ROUND_HALF_EVEN,
        decimal.ROUND_HALF_UP,
        decimal.ROUND_HALF_DOWN,
        decimal.ROUND_UP,
        decimal.ROUND_DOWN,
        decimal.ROUND_CEILING,
        decimal.ROUND_FLOOR,
        decimal.ROUND_05UP,
    },
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class PositionsSettings:
    """Settings that control table loading and fixed-point rounding."""

    currency_table_path: Optional[Path] = None
    rounding: str = decimal.ROUND_HALF_EVEN
    strict_precision: bool = False
    default_storage_bits: int = 64

    def __post_init__(self) -> None:
        # Raise: $rounding must name one of the `decimal` rounding modes
        if self.rounding not in ROUNDING_MODES:
            raise ValueError(f"Cannot create `PositionsSettings` because $rounding ('{self.rounding}') is not one of {sorted(ROUNDING_MODES)}")

        # Raise: $default_storage_bits must be a supported integer width (64 or 128)
        check_storage_bits(self.default_storage_bits)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Environment variable {name} must be a boolean, but provided value is: '{raw}'")


def load_settings() -> PositionsSettings:
    """Build settings from environment variables, loading the nearest `.env` (from the working directory) first.

    Returns:
        PositionsSettings: Fresh settings instance.

    Raises:
        ValueError: If any variable holds an invalid value.
    """
    load_dotenv(find_dotenv(usecwd=True))

    table = os.getenv("SUITE_POSITIONS_CURRENCY_TABLE")
    rounding = os.getenv("SUITE_POSITIONS_ROUNDING", decimal.ROUND_HALF_EVEN).strip().upper()
    strict = _parse_bool("SUITE_POSITIONS_STRICT_PRECISION", os.getenv("SUITE_POSITIONS_STRICT_PRECISION", ""))

    raw_bits = os.getenv("SUITE_POSITIONS_STORAGE_BITS", "64")
    try:
        storage_bits = int(raw_bits)
    except ValueError as e:
        raise ValueError(f"Environment variable SUITE_POSITIONS_STORAGE_BITS must be an integer, but provided value is: '{raw_bits}'") from e

    settings = PositionsSettings(
        currency_table_path=Path(table) if table else None,
        rounding=rounding,
        strict_precision=strict,
        default_storage_bits=storage_bits,
    )
    logger.debug(f"Loaded settings {settings}")
    return settings


_settings: Optional[PositionsSettings] = None
_settings_lock = Lock()


def get_settings() -> PositionsSettings:
    """Return the process-wide settings, loading them from the environment on first use."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = load_settings()
    return _settings


def set_settings(settings: PositionsSettings) -> None:
    """Replace the process-wide settings."""
    global _settings
    # Raise: only PositionsSettings instances are accepted
    if not isinstance(settings, PositionsSettings):
        raise TypeError(f"Cannot call `set_settings` because $settings is not PositionsSettings (got type '{type(settings).__name__}')")

    with _settings_lock:
        _settings = settings


def reset_settings() -> None:
    """Forget cached settings so the next `get_settings` call reads the environment again."""
    global _settings
    with _settings_lock:
        _settings = None
