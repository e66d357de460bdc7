"""
Daily Production Tracker — End-to-end metrics pipeline.

Builds a report session, fills it from the entries workbook (or simulated
entries when the workbook is absent), resolves targets and prints
smoke-test summaries.

Usage:
    python main.py [YYYY-MM-DD]
"""

import logging
import sys
from datetime import date

from production_tracker.config import DAILY_ENTRIES_FILE, TARGETS_DIR
from production_tracker.dashboard import get_entry_overview, get_missing_entries
from production_tracker.kpis import compute_item_metrics
from production_tracker.loaders import load_daily_entries, merge_entries
from production_tracker.models import Section
from production_tracker.session import ReportSession, parse_report_date
from production_tracker.simulator import generate_daily_entries
from production_tracker.targets import JsonFileStore, InMemoryStore, resolve_monthly_target
from production_tracker.transforms import build_item_metrics_frame, build_section_totals_frame

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the metrics pipeline and print smoke-test outputs."""

    report_date = date.today()
    if len(sys.argv) > 1:
        parsed = parse_report_date(sys.argv[1])
        if parsed is None:
            logger.warning("Ignoring unparseable date argument: %s", sys.argv[1])
        else:
            report_date = parsed

    print("=" * 70)
    print("  DAILY PRODUCTION TRACKER")
    print("  Metrics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Session and entries
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING ENTRIES")
    print("-" * 40)

    session = ReportSession(JsonFileStore(TARGETS_DIR), report_date)

    if DAILY_ENTRIES_FILE.exists():
        entries = load_daily_entries(str(DAILY_ENTRIES_FILE))
    else:
        logger.warning("No entries workbook at %s, using simulated entries", DAILY_ENTRIES_FILE)
        entries = generate_daily_entries(session.items, report_date)
    session.items = merge_entries(session.items, entries)
    print(f"\nEntries: {len(entries)} rows loaded for {report_date.isoformat()}")
    print(entries.to_string(index=False))

    # ------------------------------------------------------------------
    # 2. Metric tables
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] BUILDING METRIC TABLES")
    print("-" * 40)

    item_frame = build_item_metrics_frame(session.items, report_date)
    print(f"\nitem metrics: {len(item_frame)} rows")
    print(item_frame[[
        "id", "ftd_value", "mtd", "target_per_day", "projected_monthly",
        "achievement_percent", "band",
    ]].to_string(index=False))

    section_frame = build_section_totals_frame(session.items, report_date)
    print(f"\nsection totals: {len(section_frame)} rows")
    print(section_frame.to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    overview = get_entry_overview(session.items, report_date)
    for section in overview["sections"].values():
        print(f"  {section['label']:16s} | {section['totals']}")
    print(f"\nDepartments without FTD: {get_missing_entries(session.items)}")

    # ------------------------------------------------------------------
    # 4. Acceptance checks
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] ACCEPTANCE CRITERIA CHECKS")
    print("-" * 40)

    # Check 1: worked example, day 15 of a 30-day month
    check_session = ReportSession(InMemoryStore(), date(2025, 9, 15))
    check_session.update_item("input-solid-cont", ftd="40000")
    m = compute_item_metrics(check_session.get_item("input-solid-cont"), date(2025, 9, 15))
    check1 = (
        m.target_per_day == 66667 and m.mtd == 1090000 and m.running_avg_per_day == 72667
        and m.projected_monthly == 2180000 and m.achievement_percent == 60
    )
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] Worked example metrics: {m.as_dict()}")

    # Check 2: zero-target section never divides by zero
    bsr = check_session.section_totals(Section.BSR)
    check2 = bsr.achievement_percent == 0
    print(f"  [{'PASS' if check2 else 'FAIL'}] BSR section achievement = {bsr.achievement_percent}")

    # Check 3: override save, resolve, clear
    store = check_session.store
    check_session.save_target("input-print", 9, 500000)
    saved = resolve_monthly_target(store, "input-print", 2025, 9)
    other = resolve_monthly_target(store, "input-print", 2025, 10)
    check_session.save_target("input-print", 9, 0)
    cleared = resolve_monthly_target(store, "input-print", 2025, 9)
    check3 = saved == 500000 and other == 1303000 and cleared == 1303000
    print(f"  [{'PASS' if check3 else 'FAIL'}] Override resolve: saved={saved} other={other} cleared={cleared}")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
