from __future__ import annotations

# Loads the ISO 4217 currency table (packaged CSV or a user-supplied file) into plain row tuples
# that `CurrencyRegistry.register_all` accepts.

import logging
from importlib import resources
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

CurrencyRow = Tuple[str, int, str, str, Optional[int]]

REQUIRED_COLUMNS = ("identifier", "minor_unit_digits", "iso_code", "numeric_code", "display_name")


def _read_frame(path: Optional[Path]) -> pd.DataFrame:
    if path is not None:
        return pd.read_csv(path, dtype=str, keep_default_na=False)

    with resources.as_file(resources.files("suite_positions") / "data" / "iso4217.csv") as packaged:
        return pd.read_csv(packaged, dtype=str, keep_default_na=False)


def load_currency_table(path: Optional[Path | str] = None) -> List[CurrencyRow]:
    """Load currency rows from a CSV table.

    The CSV must contain the columns `identifier`, `minor_unit_digits`, `iso_code`,
    `numeric_code` and `display_name`. Rows with an empty `minor_unit_digits` (ISO "N.A.",
    e.g. precious metals and testing codes) are skipped. An empty `numeric_code` becomes None.

    Args:
        path: CSV file to read. When None, the packaged ISO 4217 table is used.

    Returns:
        List of `(identifier, minor_unit_digits, iso_code, display_name, numeric_code)` tuples.

    Raises:
        ValueError: If required columns are missing or a numeric field cannot be parsed.
    """
    source = Path(path) if path is not None else None
    df = _read_frame(source)

    # Raise: all required columns must be present
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"Cannot call `load_currency_table` because columns {missing} are missing in '{source or 'iso4217.csv'}'")

    rows: List[CurrencyRow] = []
    for record in df.itertuples(index=False):
        minor_unit = record.minor_unit_digits.strip()
        if not minor_unit or minor_unit.upper() == "N.A.":
            logger.debug(f"Skipped currency {record.identifier} because its minor unit is not applicable")
            continue

        numeric = record.numeric_code.strip()
        try:
            minor_unit_digits = int(minor_unit)
            numeric_code = int(numeric) if numeric else None
        except ValueError as e:
            raise ValueError(f"Cannot call `load_currency_table` because the row for '{record.identifier}' has a non-integer numeric field") from e

        rows.append((record.identifier, minor_unit_digits, record.iso_code, record.display_name, numeric_code))

    logger.info(f"Loaded {len(rows)} currencies from '{source or 'iso4217.csv'}'")
    return rows
