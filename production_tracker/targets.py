"""
Monthly target resolution against a year-scoped override table.

Overrides are persisted as JSON text under one key per year, shaped as
``{"<department id>": {"<month>": <target>}}``. A cell is either overridden
(positive value stored) or default (absent); saving zero or an invalid
value deletes the cell.

To swap the file store for a database:
    Implement ``get(key)`` / ``set(key, value)`` on any object and pass it
    as ``store``. The serialised table format is unchanged.
"""

import json
import logging
import re
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Mapping

from .config import TARGETS_KEY_TEMPLATE, default_targets
from .loaders.utils import safe_float
from .models import ProductionItem

logger = logging.getLogger(__name__)

TargetOverrideTable = dict[str, dict[int, float]]


# ---------------------------------------------------------------------------
# Key-value stores
# ---------------------------------------------------------------------------
class InMemoryStore:
    """Dict-backed store; contents last for the life of the object."""

    def __init__(self, initial: Mapping[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """One text file per key inside ``directory``."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        safe_name = re.sub(r"[^A-Za-z0-9_.-]+", "_", key)
        return self.directory / f"{safe_name}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
        logger.info("Wrote %s", path)


# ---------------------------------------------------------------------------
# Coercion at the storage boundary
# ---------------------------------------------------------------------------
def targets_key(year: int) -> str:
    """Return the storage key holding the override table for ``year``."""
    return TARGETS_KEY_TEMPLATE.format(year=year)


def coerce_month(value: Any) -> int | None:
    """Return a month index 1-12 from an int or numeric string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        month = value
    elif isinstance(value, str) and value.strip().isdigit():
        month = int(value.strip())
    else:
        return None
    if 1 <= month <= 12:
        return month
    return None


def coerce_target(value: Any) -> float | None:
    """Return a finite positive target, or None when the value is unusable."""
    result = safe_float(value)
    if result is None or result <= 0:
        return None
    return result


def parse_override_table(raw: str | None) -> TargetOverrideTable:
    """Deserialise stored override JSON without ever raising.

    Any structural mismatch at the top level yields an empty table.
    Individual cells with an invalid month key or a non-positive value
    are dropped.
    """
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except (ValueError, TypeError):
        logger.warning("Stored targets are not valid JSON — ignoring overrides")
        return {}
    if not isinstance(payload, dict):
        logger.warning("Stored targets are not an object, ignoring overrides")
        return {}

    table: TargetOverrideTable = {}
    for dept_id, months in payload.items():
        if not isinstance(months, dict):
            logger.warning("Skipping malformed overrides for '%s'", dept_id)
            continue
        cells: dict[int, float] = {}
        for month_key, raw_value in months.items():
            month = coerce_month(month_key)
            # Stored values must be JSON numbers, not numeric strings
            if month is None or isinstance(raw_value, str):
                continue
            target = coerce_target(raw_value)
            if target is not None:
                cells[month] = target
        if cells:
            table[str(dept_id)] = cells
    return table


def serialise_override_table(table: TargetOverrideTable) -> str:
    """Serialise an override table; month keys become strings."""
    payload = {
        dept_id: {
            str(month): int(value) if float(value).is_integer() else value
            for month, value in sorted(months.items())
        }
        for dept_id, months in table.items()
        if months
    }
    return json.dumps(payload, sort_keys=True)


def load_override_table(store, year: int) -> TargetOverrideTable:
    """Read the override table for ``year``; storage failures give {}."""
    try:
        raw = store.get(targets_key(year))
    except (OSError, UnicodeDecodeError):
        logger.exception("Failed to read stored targets for %d", year)
        return {}
    return parse_override_table(raw)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------
def resolve_monthly_target(
    store,
    department_id: str,
    year: int,
    month: int,
    defaults: Mapping[str, float] | None = None,
) -> float:
    """Return the effective monthly target for a department.

    A saved positive override for (department_id, year, month) wins;
    otherwise the department's built-in default (0 if it has none).
    """
    if defaults is None:
        defaults = default_targets()
    table = load_override_table(store, year)
    override = table.get(department_id, {}).get(coerce_month(month))
    if override is not None:
        return override
    return float(defaults.get(department_id, 0.0))


def save_monthly_target(
    store,
    department_id: str,
    year: int,
    month: int,
    value: Any,
) -> TargetOverrideTable:
    """Store or clear one override cell and return the updated table.

    A finite value > 0 is stored. Missing, zero or invalid values delete
    the cell, reverting the department to its default for that month.
    Other cells of the same year are preserved.
    """
    month_index = coerce_month(month)
    if month_index is None:
        raise ValueError(f"month must be between 1 and 12, got {month!r}")

    table = load_override_table(store, year)
    target = coerce_target(value)

    if target is not None:
        table.setdefault(department_id, {})[month_index] = target
        logger.info(
            "Saved target %s for %s %d-%02d", target, department_id, year, month_index
        )
    else:
        months = table.get(department_id, {})
        if month_index in months:
            del months[month_index]
            logger.info(
                "Cleared target override for %s %d-%02d", department_id, year, month_index
            )
        if department_id in table and not table[department_id]:
            del table[department_id]

    store.set(targets_key(year), serialise_override_table(table))
    return table


def apply_targets_for_month(
    store,
    items: list[ProductionItem],
    report_date: date,
    defaults: Mapping[str, float] | None = None,
) -> list[ProductionItem]:
    """Return items with monthly targets resolved for the report date's month.

    Items without an override take their target from ``defaults``, never
    from their current ``monthly_target``, which may hold an earlier override.
    """
    if defaults is None:
        defaults = default_targets()

    table = load_override_table(store, report_date.year)
    resolved = []
    for item in items:
        override = table.get(item.id, {}).get(report_date.month)
        if override is not None:
            target = override
        else:
            target = float(defaults.get(item.id, 0.0))
        resolved.append(replace(item, monthly_target=target))

    logger.info(
        "Resolved targets for %d items (%d-%02d)",
        len(resolved), report_date.year, report_date.month,
    )
    return resolved
