"""
Daily Production Tracker — metrics and target backend

Derives month-to-date progress for each production department from the
operator's daily figure-to-date (FTD) entry, and resolves which monthly
target applies for a given month.

To swap the JSON target store for a database:
    Pass any object with get(key) / set(key, value) to the functions in
    production_tracker.targets. The serialised override table is unchanged.

To connect to Streamlit/Dash:
    Call dashboard.get_entry_overview(items, report_date) to get a plain
    dict suitable for rendering section totals and per-department cards.

To add a department:
    Add an entry to config.DEPARTMENT_REGISTRY with its name, section and
    default monthly target.
"""
