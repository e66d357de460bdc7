"""
Simulated data generator for the daily production entry screen.

Generates plausible FTD and previous-MTD figures from each department's
monthly target. All values are synthetic.
"""

from datetime import date

import numpy as np
import pandas as pd

from .kpis import days_in_month
from .models import ProductionItem

# Daily output as a fraction of target-per-day
_DAILY_BIAS = 1.0
_DAILY_STD = 0.12


def generate_daily_entries(
    items: list[ProductionItem],
    report_date: date,
    seed: int = 42,
) -> pd.DataFrame:
    """Generate simulated entries for the given report date.

    Departments without a target produce nothing. previous_mtd covers
    the days before the report date.

    Returns
    -------
    DataFrame with columns: id, ftd, remarks, previous_mtd
    """
    rng = np.random.default_rng(seed)
    month_days = days_in_month(report_date.year, report_date.month)
    elapsed = report_date.day - 1

    rows = []
    for item in items:
        target_per_day = item.monthly_target / month_days
        if target_per_day <= 0:
            ftd = 0.0
            previous_mtd = 0.0
        else:
            factors = rng.normal(_DAILY_BIAS, _DAILY_STD, size=elapsed + 1)
            factors = np.clip(factors, 0.0, None)
            previous_mtd = float(np.sum(factors[:elapsed]) * target_per_day)
            ftd = float(factors[-1] * target_per_day)

        rows.append({
            "id": item.id,
            "ftd": str(int(round(ftd))),
            "remarks": "",
            "previous_mtd": float(round(previous_mtd)),
        })

    return pd.DataFrame(rows, columns=["id", "ftd", "remarks", "previous_mtd"])
