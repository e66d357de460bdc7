"""
Domain types for the daily production report.

ProductionItem is the operator-facing record; DerivedMetrics and
SectionTotals are computed views and are never persisted.
"""

import math
from dataclasses import dataclass
from enum import Enum

from .config import DEPARTMENT_REGISTRY
from .loaders.utils import parse_ftd


def _is_non_negative(value) -> bool:
    return math.isfinite(value) and value >= 0


class Section(str, Enum):
    """Named group of departments reported together."""

    INPUT = "input"
    BSR = "bsr"


@dataclass(frozen=True)
class ProductionItem:
    """One department's record for the active report date.

    ``ftd`` is kept as text so that "not entered" (empty string) stays
    distinguishable from an entered zero.
    """

    id: str
    name: str
    section: Section
    ftd: str = ""
    remarks: str = ""
    monthly_target: float = 0.0
    previous_mtd: float = 0.0

    def __post_init__(self):
        if not isinstance(self.section, Section):
            object.__setattr__(self, "section", Section(self.section))
        if not _is_non_negative(self.monthly_target):
            raise ValueError(f"monthly_target must be >= 0 for {self.id!r}")
        if not _is_non_negative(self.previous_mtd):
            raise ValueError(f"previous_mtd must be >= 0 for {self.id!r}")

    @property
    def ftd_value(self) -> float:
        return parse_ftd(self.ftd)

    @property
    def has_ftd(self) -> bool:
        return bool(self.ftd and self.ftd.strip())


@dataclass(frozen=True)
class DerivedMetrics:
    mtd: int
    target_per_day: int
    running_avg_per_day: int
    projected_monthly: int
    achievement_percent: int

    def as_dict(self) -> dict:
        return {
            "mtd": self.mtd,
            "target_per_day": self.target_per_day,
            "running_avg_per_day": self.running_avg_per_day,
            "projected_monthly": self.projected_monthly,
            "achievement_percent": self.achievement_percent,
        }


@dataclass(frozen=True)
class SectionTotals(DerivedMetrics):
    """Aggregate metrics for a section, computed from summed inputs."""

    section: Section = Section.INPUT
    ftd_sum: int = 0
    monthly_target_sum: int = 0

    def as_dict(self) -> dict:
        result = super().as_dict()
        result.update({
            "section": self.section.value,
            "ftd_sum": self.ftd_sum,
            "monthly_target_sum": self.monthly_target_sum,
        })
        return result


def default_items() -> list[ProductionItem]:
    """Build a fresh item list from the department registry."""
    return [
        ProductionItem(
            id=dept_id,
            name=entry["name"],
            section=Section(entry["section"]),
            monthly_target=float(entry["default_target"]),
            previous_mtd=float(entry["previous_mtd"]),
        )
        for dept_id, entry in DEPARTMENT_REGISTRY.items()
    ]
