"""
Data transforms: flatten department items, section aggregates and target
overrides into tabular frames for display and export.
"""

import logging
from datetime import date
from typing import Mapping

import pandas as pd

from .config import SECTION_LABELS, default_targets
from .kpis import classify_achievement, compute_item_metrics, compute_section_totals
from .models import ProductionItem, Section
from .targets import load_override_table

logger = logging.getLogger(__name__)

_METRIC_COLS = [
    "mtd",
    "target_per_day",
    "running_avg_per_day",
    "projected_monthly",
    "achievement_percent",
]


def build_item_metrics_frame(
    items: list[ProductionItem],
    report_date: date,
) -> pd.DataFrame:
    """One row per department with its inputs and derived metrics.

    Returns
    -------
    DataFrame with columns:
        id, name, section, ftd, has_ftd, ftd_value, remarks, monthly_target,
        previous_mtd, mtd, target_per_day, running_avg_per_day,
        projected_monthly, achievement_percent, band
    """
    schema_cols = [
        "id", "name", "section", "ftd", "has_ftd", "ftd_value", "remarks",
        "monthly_target", "previous_mtd", *_METRIC_COLS, "band",
    ]

    rows = []
    for item in items:
        metrics = compute_item_metrics(item, report_date)
        rows.append({
            "id": item.id,
            "name": item.name,
            "section": item.section.value,
            "ftd": item.ftd,
            "has_ftd": item.has_ftd,
            "ftd_value": item.ftd_value,
            "remarks": item.remarks,
            "monthly_target": item.monthly_target,
            "previous_mtd": item.previous_mtd,
            **metrics.as_dict(),
            "band": classify_achievement(metrics.achievement_percent),
        })

    df = pd.DataFrame(rows, columns=schema_cols)
    logger.info("Built item metrics frame with %d rows", len(df))
    return df


def build_section_totals_frame(
    items: list[ProductionItem],
    report_date: date,
) -> pd.DataFrame:
    """One row per section with aggregate inputs and metrics."""
    rows = []
    for section in Section:
        totals = compute_section_totals(items, section, report_date)
        row = totals.as_dict()
        row["label"] = SECTION_LABELS.get(section.value, section.value)
        row["band"] = classify_achievement(totals.achievement_percent)
        rows.append(row)

    df = pd.DataFrame(rows)
    df = df[[
        "section", "label", "ftd_sum", "monthly_target_sum", *_METRIC_COLS, "band",
    ]]
    logger.info("Built section totals frame with %d rows", len(df))
    return df


def build_targets_frame(
    store,
    year: int,
    defaults: Mapping[str, float] | None = None,
) -> pd.DataFrame:
    """Department x month grid of effective targets for one year.

    Returns
    -------
    DataFrame with columns: department_id, month, target, default, overridden
    """
    if defaults is None:
        defaults = default_targets()

    table = load_override_table(store, year)
    rows = []
    for dept_id, default in defaults.items():
        overrides = table.get(dept_id, {})
        for month in range(1, 13):
            override = overrides.get(month)
            rows.append({
                "department_id": dept_id,
                "month": month,
                "target": override if override is not None else float(default),
                "default": float(default),
                "overridden": override is not None,
            })

    df = pd.DataFrame(rows, columns=["department_id", "month", "target", "default", "overridden"])
    logger.info("Built targets frame for %d with %d overrides", year, int(df["overridden"].sum()))
    return df
