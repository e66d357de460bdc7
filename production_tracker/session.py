"""
Report session: the in-memory state behind the data-entry screen.

Holds the active report date and department items, re-resolving monthly
targets whenever the date changes or a target is saved.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Any

from .config import default_targets
from .kpis import compute_item_metrics, compute_section_totals
from .loaders.utils import normalise_date
from .models import DerivedMetrics, ProductionItem, Section, SectionTotals, default_items
from .targets import InMemoryStore, apply_targets_for_month, save_monthly_target

logger = logging.getLogger(__name__)

# Fields an operator may edit on the entry form
EDITABLE_FIELDS = {"ftd", "remarks"}


def parse_report_date(value: Any) -> date | None:
    """Parse the report date passed by the date-selection screen."""
    return normalise_date(value)


def is_selectable_report_date(report_date: date, today: date | None = None) -> bool:
    """Return True when the date may be picked for a new report (not in the future)."""
    if today is None:
        today = date.today()
    return report_date <= today


class ReportSession:
    """Active report: one date, one list of department items."""

    def __init__(
        self,
        store=None,
        report_date: date | None = None,
        items: list[ProductionItem] | None = None,
    ):
        self.store = store if store is not None else InMemoryStore()
        self.report_date = report_date or date.today()
        items = list(items) if items is not None else default_items()
        # Captured once; items later carry resolved overrides
        self.defaults = {
            **{item.id: item.monthly_target for item in items},
            **default_targets(),
        }
        self.items = apply_targets_for_month(
            self.store, items, self.report_date, self.defaults
        )

    def set_report_date(self, report_date: date) -> None:
        """Switch the active date and refresh targets for its month."""
        self.report_date = report_date
        self.items = apply_targets_for_month(self.store, self.items, report_date, self.defaults)
        logger.info("Report date set to %s", report_date.isoformat())

    def get_item(self, item_id: str) -> ProductionItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)

    def update_item(self, item_id: str, **fields: str) -> ProductionItem:
        """Replace editable text fields on one item."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit fields: {sorted(unknown)}")

        current = self.get_item(item_id)
        updated = replace(current, **{k: str(v) for k, v in fields.items()})
        self.items = [updated if item.id == item_id else item for item in self.items]
        return updated

    def item_metrics(self, item_id: str) -> DerivedMetrics:
        return compute_item_metrics(self.get_item(item_id), self.report_date)

    def section_totals(self, section: Section | str) -> SectionTotals:
        return compute_section_totals(self.items, section, self.report_date)

    def save_target(self, item_id: str, month: int, value: Any) -> None:
        """Persist an override for the session's year and refresh targets."""
        self.get_item(item_id)
        save_monthly_target(self.store, item_id, self.report_date.year, month, value)
        self.items = apply_targets_for_month(
            self.store, self.items, self.report_date, self.defaults
        )
