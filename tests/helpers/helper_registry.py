from __future__ import annotations

from suite_positions.domain.monetary.currency_registry import CurrencyRegistry

# Small currency dataset covering 0, 2 and 3 minor-unit digits
SAMPLE_ROWS = [
    ("USD", 2, "USD", "US Dollar", 840),
    ("EUR", 2, "EUR", "Euro", 978),
    ("JPY", 0, "JPY", "Yen", 392),
    ("KWD", 3, "KWD", "Kuwaiti Dinar", 414),
]


def create_registry() -> CurrencyRegistry:
    """Create an isolated registry populated with $SAMPLE_ROWS.

    Returns:
        New CurrencyRegistry that shares no state with the process-wide registry.
    """
    return CurrencyRegistry(SAMPLE_ROWS)
