"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end.
Each function returns plain dicts or DataFrames suitable for rendering
cards and tables.
"""

import logging
from datetime import date

import pandas as pd

from .config import PLANT_NAME, SECTION_LABELS
from .kpis import classify_achievement, compute_item_metrics, compute_section_totals, days_in_month
from .kpis import get_section_items, round_half_up
from .models import ProductionItem, Section

logger = logging.getLogger(__name__)


def get_entry_overview(items: list[ProductionItem], report_date: date) -> dict:
    """Single entry point the entry page calls to populate cards.

    Returns
    -------
    Dict with structure:
    {
        "plant": "...",
        "report_date": "2025-09-15",
        "sections": {
            "input": {
                "label": "Input",
                "totals": {...SectionTotals.as_dict(), "band": "at_risk"},
                "items": [
                    {"id": ..., "name": ..., "ftd": ..., "remarks": ...,
                     "metrics": {...} or None, "band": ... or None},
                ],
            },
            ...
        },
    }

    Per-item metrics are None until an FTD has been entered.
    """
    sections: dict = {}
    for section in Section:
        members = get_section_items(items, section)
        totals = compute_section_totals(items, section, report_date)

        item_rows = []
        for item in members:
            metrics = None
            band = None
            if item.has_ftd:
                derived = compute_item_metrics(item, report_date)
                metrics = derived.as_dict()
                band = classify_achievement(derived.achievement_percent)
            item_rows.append({
                "id": item.id,
                "name": item.name,
                "ftd": item.ftd,
                "remarks": item.remarks,
                "metrics": metrics,
                "band": band,
            })

        sections[section.value] = {
            "label": SECTION_LABELS.get(section.value, section.value),
            "totals": {
                **totals.as_dict(),
                "band": classify_achievement(totals.achievement_percent),
            },
            "items": item_rows,
        }

    return {
        "plant": PLANT_NAME,
        "report_date": report_date.isoformat(),
        "sections": sections,
    }


def get_targets_overview(items: list[ProductionItem], report_date: date) -> pd.DataFrame:
    """Monthly target and average daily target per department.

    Returns
    -------
    DataFrame with columns: id, name, section, monthly_target, target_per_day
    """
    month_days = days_in_month(report_date.year, report_date.month)
    rows = [
        {
            "id": item.id,
            "name": item.name,
            "section": item.section.value,
            "monthly_target": item.monthly_target,
            "target_per_day": round_half_up(item.monthly_target / month_days),
        }
        for item in items
    ]
    return pd.DataFrame(
        rows, columns=["id", "name", "section", "monthly_target", "target_per_day"]
    )


def get_missing_entries(items: list[ProductionItem]) -> list[str]:
    """Return ids of departments with no FTD entered yet."""
    missing = [item.id for item in items if not item.has_ftd]
    if missing:
        logger.info("%d departments without an FTD entry", len(missing))
    return missing
