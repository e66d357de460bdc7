"""
KPI computation functions — pure functions with no side effects.

Provides the shared rounding rule, month-length calculation, per-department
progress metrics, section aggregation and achievement banding.
"""

import calendar
import logging
import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .config import ACHIEVEMENT_BANDS
from .loaders.utils import parse_ftd  # noqa: F401
from .models import DerivedMetrics, ProductionItem, Section, SectionTotals

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero.

    Non-finite values round to 0 so they never reach a display.
    """
    if value is None or not math.isfinite(value):
        return 0
    return int(Decimal(repr(float(value))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in the given Gregorian month."""
    return calendar.monthrange(year, month)[1]


def _derive(
    ftd: float,
    monthly_target: float,
    previous_mtd: float,
    report_date: date,
) -> dict:
    """Compute the five progress metrics from raw quantities (unrounded)."""
    day = report_date.day or 1
    month_days = days_in_month(report_date.year, report_date.month)

    target_per_day = monthly_target / month_days
    mtd = previous_mtd + ftd
    running_avg_per_day = mtd / day
    projected_monthly = running_avg_per_day * month_days
    if target_per_day > 0:
        achievement_percent = (ftd / target_per_day) * 100
    else:
        achievement_percent = 0.0

    return {
        "mtd": round_half_up(mtd),
        "target_per_day": round_half_up(target_per_day),
        "running_avg_per_day": round_half_up(running_avg_per_day),
        "projected_monthly": round_half_up(projected_monthly),
        "achievement_percent": round_half_up(achievement_percent),
    }


def compute_item_metrics(item: ProductionItem, report_date: date) -> DerivedMetrics:
    """Return progress metrics for one department on the report date.

    Logic
    -----
    - target_per_day = monthly_target / days_in_month
    - mtd = previous_mtd + ftd
    - running_avg_per_day = mtd / day_of_month
    - projected_monthly = running_avg_per_day * days_in_month
    - achievement_percent = ftd / target_per_day * 100 (0 with no target)
    """
    return DerivedMetrics(
        **_derive(item.ftd_value, item.monthly_target, item.previous_mtd, report_date)
    )


def get_section_items(
    items: Iterable[ProductionItem],
    section: Section | str,
) -> list[ProductionItem]:
    """Return the items tagged with the given section."""
    section = Section(section)
    return [item for item in items if item.section is section]


def compute_section_totals(
    items: Iterable[ProductionItem],
    section: Section | str,
    report_date: date,
) -> SectionTotals:
    """Aggregate a section and derive metrics from the summed quantities.

    Section achievement is the achievement of the aggregate, not the mean
    of the member achievements.
    """
    section = Section(section)
    members = get_section_items(items, section)
    if not members:
        logger.warning("No items in section '%s'", section.value)

    ftd_sum = sum(item.ftd_value for item in members)
    target_sum = sum(item.monthly_target for item in members)
    previous_mtd_sum = sum(item.previous_mtd for item in members)

    return SectionTotals(
        section=section,
        ftd_sum=round_half_up(ftd_sum),
        monthly_target_sum=round_half_up(target_sum),
        **_derive(ftd_sum, target_sum, previous_mtd_sum, report_date),
    )


def classify_achievement(percent: float) -> str:
    """Return 'on_target', 'at_risk', or 'behind'.

    Logic
    -----
    on_target  if percent >= 100
    at_risk    if 80 <= percent < 100
    behind     otherwise
    """
    if percent >= ACHIEVEMENT_BANDS["on_target"]:
        return "on_target"
    if percent >= ACHIEVEMENT_BANDS["at_risk"]:
        return "at_risk"
    return "behind"
