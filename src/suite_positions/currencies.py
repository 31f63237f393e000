"""Short names for every registered currency, as Cash instruments.

    from suite_positions.currencies import USD, JPY

    price = 10 * USD  # Position(Cash(USD), 10.00)

Names are resolved lazily against the process-wide registry, so currencies registered
after import are available as well.
"""

from __future__ import annotations

from typing import List

from suite_positions.domain.instrument import Cash
from suite_positions.domain.monetary.currency_registry import get_default_registry


def __getattr__(name: str) -> Cash:
    registry = get_default_registry()
    # Only exact upper-case identifiers are bindings; anything else is a normal missing attribute
    if name.isupper() and name in registry:
        return Cash(name, registry)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> List[str]:
    return sorted(set(globals()) | set(get_default_registry().identifiers()))
