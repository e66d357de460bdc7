"""
Daily Production Tracker — Interactive Entry Page

Run with:  streamlit run app.py
"""

from datetime import date

import plotly.graph_objects as go
import streamlit as st

from production_tracker.config import DEPARTMENT_REGISTRY, FTD_UNIT, TARGETS_DIR
from production_tracker.dashboard import get_entry_overview, get_targets_overview
from production_tracker.models import Section
from production_tracker.session import ReportSession, is_selectable_report_date, parse_report_date
from production_tracker.targets import JsonFileStore
from production_tracker.transforms import build_targets_frame

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Production Data Entry",
    page_icon="🏭",
    layout="wide",
    initial_sidebar_state="expanded",
)

BAND_COLORS = {
    "on_target": "#2ecc71",
    "at_risk": "#f39c12",
    "behind": "#e74c3c",
}

BAND_LABELS = {
    "on_target": "On / above target",
    "at_risk": "At risk",
    "behind": "Behind target",
}


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------
def get_session() -> ReportSession:
    if "report" not in st.session_state:
        initial = parse_report_date(st.query_params.get("date")) or date.today()
        st.session_state["report"] = ReportSession(JsonFileStore(TARGETS_DIR), initial)
    return st.session_state["report"]


session = get_session()

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("Production Tracker")
st.sidebar.markdown("Daily FTD entry and monthly targets")
st.sidebar.divider()

today = date.today()
# Keep a date passed in ?date= selected on first render
date_option = st.sidebar.radio(
    "Report Date",
    ["Today", "Custom Date"],
    index=0 if session.report_date == today else 1,
)
if date_option == "Today":
    selected_date = today
else:
    selected_date = st.sidebar.date_input(
        "Select a date", value=min(session.report_date, today), max_value=today,
    )

if not is_selectable_report_date(selected_date, today):
    st.sidebar.error("Report date cannot be in the future.")
elif selected_date != session.report_date:
    session.set_report_date(selected_date)
    st.query_params["date"] = selected_date.isoformat()

st.sidebar.caption(f"Selected report date: {session.report_date:%A, %B %d, %Y}")

page = st.sidebar.radio("Navigate", ["Data Entry", "Targets"])


# ---------------------------------------------------------------------------
# Helper: achievement card
# ---------------------------------------------------------------------------
def achievement_card(label: str, metrics: dict, band: str):
    color = BAND_COLORS.get(band, "#95a5a6")
    st.markdown(
        f"""
        <div style="background: linear-gradient(135deg, {color}22, {color}11);
                    border-left: 4px solid {color};
                    border-radius: 8px; padding: 16px; margin-bottom: 8px;">
            <div style="font-size: 13px; color: #888; font-weight: 600; text-transform: uppercase;">{label}</div>
            <div style="font-size: 28px; font-weight: 700; color: #222; margin: 4px 0;">{metrics['achievement_percent']}%</div>
            <div style="font-size: 13px; color: #666;">
                MTD: {metrics['mtd']:,} {FTD_UNIT} &nbsp;|&nbsp;
                Projected: {metrics['projected_monthly']:,} {FTD_UNIT} &nbsp;|&nbsp;
                <span style="color: {color}; font-weight: 600;">{BAND_LABELS.get(band, '')}</span>
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


# ===========================================================================
# PAGE: Data Entry
# ===========================================================================
if page == "Data Entry":
    st.title("Production Data Entry")
    st.caption(f"Report Date: **{session.report_date:%A, %B %d, %Y}**")

    with st.expander("Targets Overview"):
        st.dataframe(
            get_targets_overview(session.items, session.report_date),
            width="stretch", hide_index=True,
        )

    overview = get_entry_overview(session.items, session.report_date)
    targets_overview = get_targets_overview(session.items, session.report_date).set_index("id")
    for section in Section:
        section_data = overview["sections"][section.value]
        st.header(section_data["label"])

        for item_row in section_data["items"]:
            item = session.get_item(item_row["id"])
            with st.container(border=True):
                st.markdown(f"**{item.name}**")
                col1, col2, col3 = st.columns(3)
                with col1:
                    st.number_input(
                        "Average Daily Target",
                        value=int(targets_overview.loc[item.id, "target_per_day"]),
                        disabled=True,
                        key=f"tpd-{item.id}",
                    )
                with col2:
                    ftd = st.text_input("FTD (Figure to Date)", value=item.ftd, key=f"ftd-{item.id}")
                with col3:
                    remarks = st.text_input("Remarks", value=item.remarks, key=f"remarks-{item.id}")

                if ftd != item.ftd or remarks != item.remarks:
                    session.update_item(item.id, ftd=ftd, remarks=remarks)
                    st.rerun()

                if item_row["metrics"] is not None:
                    achievement_card(item.name, item_row["metrics"], item_row["band"])

        totals = section_data["totals"]
        st.subheader(f"{section_data['label']} — Section Totals")
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Monthly Target Sum", f"{totals['monthly_target_sum']:,}")
        c2.metric("FTD Sum", f"{totals['ftd_sum']:,}")
        c3.metric("MTD", f"{totals['mtd']:,}")
        c4.metric("Achievement", f"{totals['achievement_percent']}%")
        st.divider()


# ===========================================================================
# PAGE: Targets
# ===========================================================================
elif page == "Targets":
    year = session.report_date.year
    st.title(f"Monthly Targets — {year}")

    targets = build_targets_frame(session.store, year)

    grid = targets.pivot(index="department_id", columns="month", values="target")
    grid.index = [DEPARTMENT_REGISTRY[d]["name"] for d in grid.index]
    st.dataframe(grid, width="stretch")

    st.subheader("Set a target")
    with st.form("save-target"):
        dept_id = st.selectbox(
            "Department",
            list(DEPARTMENT_REGISTRY),
            format_func=lambda d: DEPARTMENT_REGISTRY[d]["name"],
        )
        month = st.selectbox("Month", list(range(1, 13)), index=session.report_date.month - 1)
        value = st.text_input("Monthly target (blank or 0 reverts to default)")
        if st.form_submit_button("Save"):
            session.save_target(dept_id, month, value)
            st.success("Target saved.")
            st.rerun()

    overrides = targets[targets["overridden"]]
    if not overrides.empty:
        fig = go.Figure(go.Bar(
            x=overrides["department_id"] + " / " + overrides["month"].astype(str),
            y=overrides["target"] - overrides["default"],
            marker_color=[
                "#2ecc71" if v >= 0 else "#e74c3c"
                for v in (overrides["target"] - overrides["default"])
            ],
        ))
        fig.update_layout(
            title="Override vs Default",
            yaxis_title=FTD_UNIT,
            height=350,
            plot_bgcolor="rgba(0,0,0,0)",
        )
        fig.add_hline(y=0, line_dash="dash", line_color="#888")
        st.plotly_chart(fig, width="stretch")
    else:
        st.info("No overrides saved for this year; defaults apply.")
