"""
Configuration: department registry, storage paths, constants.

DEPARTMENT_REGISTRY maps each department id to its display name, section,
built-in monthly target and the sample previous month-to-date figure used
when no loaded entries are available.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths: adjust these if the data directory moves
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent

TARGETS_DIR = DATA_DIR / "targets"
DAILY_ENTRIES_FILE = DATA_DIR / "daily_entries.xlsx"

# ---------------------------------------------------------------------------
# Plant identity
# ---------------------------------------------------------------------------
PLANT_NAME = "Textile Processing Plant"

# ---------------------------------------------------------------------------
# Department registry
# ---------------------------------------------------------------------------
# section: "input" or "bsr" (see models.Section)
# default_target: built-in monthly target, overridable per month
# previous_mtd: sample cumulative figure through yesterday
DEPARTMENT_REGISTRY: dict[str, dict] = {
    "input-solid-cont": {
        "name": "Input-Solid Cont Dyeing",
        "section": "input",
        "default_target": 2_000_000,
        "previous_mtd": 1_050_000,
    },
    "input-solid-conv": {
        "name": "Input-Solid Conv. Dyeing",
        "section": "input",
        "default_target": 289_000,
        "previous_mtd": 156_000,
    },
    "input-print": {
        "name": "Input-Print",
        "section": "input",
        "default_target": 1_303_000,
        "previous_mtd": 687_000,
    },
    "input-yarn-dyed": {
        "name": "Input-Yarn Dyed",
        "section": "input",
        "default_target": 296_000,
        "previous_mtd": 158_000,
    },
    "input-rfd-wht": {
        "name": "Input-RFD/WHT",
        "section": "input",
        "default_target": 112_000,
        "previous_mtd": 59_000,
    },
    "bsr-solid": {
        "name": "BSR production- Solid",
        "section": "bsr",
        "default_target": 0,
        "previous_mtd": 0,
    },
    "bsr-print": {
        "name": "BSR production- Print",
        "section": "bsr",
        "default_target": 0,
        "previous_mtd": 0,
    },
    "bsr-yarn-dyed": {
        "name": "BSR production- Yarn Dyed",
        "section": "bsr",
        "default_target": 0,
        "previous_mtd": 0,
    },
    "bsr-rfd-wht": {
        "name": "BSR production- RFD/WHT",
        "section": "bsr",
        "default_target": 0,
        "previous_mtd": 0,
    },
}

# Section display labels
SECTION_LABELS: dict[str, str] = {
    "input": "Input",
    "bsr": "BSR Production",
}

# ---------------------------------------------------------------------------
# Achievement bands
# ---------------------------------------------------------------------------
# Lower bound is inclusive: 100 -> on_target, 80..99 -> at_risk, else behind
ACHIEVEMENT_BANDS: dict[str, float] = {
    "on_target": 100.0,
    "at_risk": 80.0,
}

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TARGETS_KEY_TEMPLATE = "monthlyTargets:{year}"
FTD_UNIT = "m"


def default_targets() -> dict[str, float]:
    """Return the built-in monthly target per department id."""
    return {
        dept_id: float(entry["default_target"])
        for dept_id, entry in DEPARTMENT_REGISTRY.items()
    }
