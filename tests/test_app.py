from datetime import date
from pathlib import Path

from streamlit.testing.v1 import AppTest

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


def test_query_param_date_is_kept_on_first_render():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.query_params["date"] = "2025-09-15"
    at.run()

    assert not at.exception
    assert at.session_state["report"].report_date == date(2025, 9, 15)
    assert at.sidebar.radio[0].value == "Custom Date"


def test_without_query_param_defaults_to_today():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()

    assert not at.exception
    assert at.session_state["report"].report_date == date.today()
    assert at.sidebar.radio[0].value == "Today"
