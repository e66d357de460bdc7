"""
Loader for daily department entries exported to Excel.

Expected layout: a header row (within the first 20 rows) naming at least
``id`` and ``ftd``; ``remarks`` and ``previous_mtd`` columns are optional.
One department per row below the header.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

import openpyxl
import pandas as pd

from .utils import find_header_row, safe_float

# Type-only: models imports loaders.utils
if TYPE_CHECKING:
    from ..models import ProductionItem

logger = logging.getLogger(__name__)

_COLUMNS = ["id", "ftd", "remarks", "previous_mtd"]
_HEADER_SIGNATURE = {"id", "ftd", "remarks", "previous_mtd"}


def _cell_text(val) -> str:
    if val is None:
        return ""
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val).strip()


def load_daily_entries(path: str, sheet_name: str | None = None) -> pd.DataFrame:
    """Load department entries from an Excel workbook.

    Returns
    -------
    DataFrame with columns: id, ftd, remarks, previous_mtd
        ftd and remarks are text (empty when blank); previous_mtd is float
        or NaN when the column is missing or the cell is not numeric.
    """
    try:
        wb = openpyxl.load_workbook(path, data_only=True)
    except Exception:
        logger.exception("Failed to open daily entries workbook: %s", path)
        raise

    if sheet_name is None or sheet_name not in wb.sheetnames:
        if sheet_name is not None:
            logger.warning("Sheet '%s' not found, using '%s'", sheet_name, wb.sheetnames[0])
        sheet_name = wb.sheetnames[0]

    ws = wb[sheet_name]

    header_row = find_header_row(ws, _HEADER_SIGNATURE)
    if header_row is None:
        wb.close()
        logger.warning("No entries header found in %s", path)
        return pd.DataFrame(columns=_COLUMNS)

    # Map: column index (1-based) -> canonical column name
    col_map: dict[int, str] = {}
    for cell in ws[header_row]:
        if cell.value is None:
            continue
        label = str(cell.value).strip().lower()
        if label in _HEADER_SIGNATURE:
            col_map[cell.column] = label

    rows = []
    for row_idx in range(header_row + 1, ws.max_row + 1):
        record: dict = {}
        for col_idx, col_name in col_map.items():
            record[col_name] = ws.cell(row=row_idx, column=col_idx).value

        dept_id = _cell_text(record.get("id"))
        if not dept_id:
            continue

        rows.append({
            "id": dept_id,
            "ftd": _cell_text(record.get("ftd")),
            "remarks": _cell_text(record.get("remarks")),
            "previous_mtd": safe_float(record.get("previous_mtd")),
        })

    wb.close()

    df = pd.DataFrame(rows, columns=_COLUMNS)
    df["previous_mtd"] = pd.to_numeric(df["previous_mtd"], errors="coerce")

    logger.info("Loaded %d daily entries from %s", len(df), path)
    return df


def merge_entries(
    items: list[ProductionItem],
    entries: pd.DataFrame,
) -> list[ProductionItem]:
    """Apply loaded entries to items by department id.

    Entries for unknown departments are skipped. A missing or negative
    previous_mtd keeps the item's current value.
    """
    by_id = {item.id: item for item in items}

    for _, row in entries.iterrows():
        dept_id = row["id"]
        if dept_id not in by_id:
            logger.warning("Skipping entry for unknown department '%s'", dept_id)
            continue

        changes = {"ftd": row.get("ftd") or "", "remarks": row.get("remarks") or ""}
        previous_mtd = row.get("previous_mtd")
        if pd.notna(previous_mtd) and previous_mtd >= 0:
            changes["previous_mtd"] = float(previous_mtd)
        by_id[dept_id] = replace(by_id[dept_id], **changes)

    return [by_id[item.id] for item in items]
