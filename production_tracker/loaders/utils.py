"""
Shared utilities for data ingestion: numeric coercion, date normalisation,
header detection.
"""

import logging
import math
from datetime import date, datetime
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)


def safe_float(val: Any) -> float | None:
    """Coerce a value to a finite float, returning None for anything else.

    Accepts numbers and numeric strings (surrounding whitespace and thousands
    separators are tolerated). Booleans, NaN and infinities are rejected.
    """
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, str):
        val = val.strip().replace(",", "")
        # Skip formula strings and blanks
        if not val or val.startswith("="):
            return None
        try:
            result = float(val)
        except ValueError:
            return None
    else:
        try:
            result = float(val)
        except (ValueError, TypeError):
            return None
    if not math.isfinite(result):
        return None
    return result


def parse_ftd(val: Any) -> float:
    """Parse a figure-to-date entry; empty, invalid or negative input gives 0."""
    value = safe_float(val)
    if value is None or value < 0:
        return 0.0
    return value


def normalise_date(val: Any) -> date | None:
    """Convert a datetime, ISO string or Excel serial number to a date.

    Excel serial numbers use the 1899-12-30 epoch. ISO timestamps keep the
    calendar date as written. Returns None for unparseable values.
    """
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        try:
            return (pd.Timestamp("1899-12-30") + pd.Timedelta(days=int(val))).date()
        except (ValueError, OverflowError):
            logger.warning("Could not convert serial number %s to date", val)
            return None
    if isinstance(val, str) and not val.strip():
        return None
    try:
        ts = pd.Timestamp(val)
    except (ValueError, TypeError):
        logger.warning("Could not parse date value: %s", val)
        return None
    if pd.isna(ts):
        return None
    return ts.date()


def find_header_row(
    sheet,
    signature: set[str],
    max_rows: int = 20,
) -> int | None:
    """Scan an openpyxl sheet for the row containing signature strings.

    Returns the 1-based row index where at least two cells match values
    in `signature` (case-insensitive), or None if not found within `max_rows`.
    """
    wanted = {s.lower() for s in signature}
    for row_idx in range(1, max_rows + 1):
        matches = 0
        for cell in sheet[row_idx]:
            if cell.value is not None and str(cell.value).strip().lower() in wanted:
                matches += 1
        if matches >= 2:
            return row_idx
    return None
