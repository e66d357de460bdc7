import json
from datetime import date

import pytest

from production_tracker.models import default_items
from production_tracker.targets import (
    InMemoryStore,
    JsonFileStore,
    apply_targets_for_month,
    coerce_month,
    parse_override_table,
    resolve_monthly_target,
    save_monthly_target,
    serialise_override_table,
    targets_key,
)

DEFAULTS = {"deptA": 750_000.0, "deptB": 120_000.0}


def test_resolve_without_override_returns_default():
    store = InMemoryStore()
    assert resolve_monthly_target(store, "deptA", 2025, 9, DEFAULTS) == 750_000


def test_saved_override_resolves_only_for_that_month():
    store = InMemoryStore()
    save_monthly_target(store, "deptA", 2025, 9, 500_000)
    assert resolve_monthly_target(store, "deptA", 2025, 9, DEFAULTS) == 500_000
    assert resolve_monthly_target(store, "deptA", 2025, 10, DEFAULTS) == 750_000
    assert resolve_monthly_target(store, "deptA", 2026, 9, DEFAULTS) == 750_000


def test_saving_zero_reverts_to_default():
    store = InMemoryStore()
    save_monthly_target(store, "deptA", 2025, 9, 500_000)
    save_monthly_target(store, "deptA", 2025, 9, 0)
    assert resolve_monthly_target(store, "deptA", 2025, 9, DEFAULTS) == 750_000
    assert json.loads(store.get(targets_key(2025))) == {}


@pytest.mark.parametrize("value", [None, "", "abc", -10, float("nan")])
def test_invalid_values_clear_the_cell(value):
    store = InMemoryStore()
    save_monthly_target(store, "deptA", 2025, 3, 900)
    table = save_monthly_target(store, "deptA", 2025, 3, value)
    assert "deptA" not in table


def test_save_preserves_other_cells_in_year():
    store = InMemoryStore()
    save_monthly_target(store, "deptA", 2025, 9, 500_000)
    save_monthly_target(store, "deptB", 2025, 9, 90_000)
    save_monthly_target(store, "deptA", 2025, 10, 510_000)
    save_monthly_target(store, "deptA", 2025, 9, 0)

    payload = json.loads(store.get("monthlyTargets:2025"))
    assert payload == {"deptA": {"10": 510000}, "deptB": {"9": 90000}}


def test_save_rejects_month_out_of_range():
    with pytest.raises(ValueError):
        save_monthly_target(InMemoryStore(), "deptA", 2025, 13, 100)


def test_string_value_is_accepted_on_save():
    store = InMemoryStore()
    save_monthly_target(store, "deptB", 2025, 1, "125000")
    assert resolve_monthly_target(store, "deptB", 2025, 1, DEFAULTS) == 125_000


@pytest.mark.parametrize("raw", [
    "not json", "[1, 2, 3]", "42", "null", '"text"',
])
def test_malformed_payload_degrades_to_defaults(raw):
    store = InMemoryStore({targets_key(2025): raw})
    assert parse_override_table(raw) == {}
    assert resolve_monthly_target(store, "deptA", 2025, 9, DEFAULTS) == 750_000


def test_parse_drops_bad_cells_and_keeps_good_ones():
    raw = json.dumps({
        "deptA": {"9": 500000, "13": 1, "x": 5, "10": 0, "11": "600000"},
        "deptB": "oops",
        "deptC": {"2": 42.5},
    })
    assert parse_override_table(raw) == {"deptA": {9: 500000.0}, "deptC": {2: 42.5}}


def test_serialise_uses_string_month_keys():
    text = serialise_override_table({"deptA": {9: 500000.0, 2: 12.5}})
    assert json.loads(text) == {"deptA": {"2": 12.5, "9": 500000}}


@pytest.mark.parametrize("value,expected", [
    (1, 1), (12, 12), ("9", 9), (" 3 ", 3), (0, None), (13, None), ("x", None), (True, None), (9.0, None),
])
def test_coerce_month(value, expected):
    assert coerce_month(value) == expected


def test_unknown_department_resolves_to_zero():
    assert resolve_monthly_target(InMemoryStore(), "nobody", 2025, 1, DEFAULTS) == 0


def test_json_file_store_round_trip(tmp_path):
    store = JsonFileStore(tmp_path / "targets")
    assert store.get(targets_key(2025)) is None

    save_monthly_target(store, "deptA", 2025, 9, 500_000)
    reopened = JsonFileStore(tmp_path / "targets")
    assert resolve_monthly_target(reopened, "deptA", 2025, 9, DEFAULTS) == 500_000
    assert len(list((tmp_path / "targets").glob("*.json"))) == 1


def test_json_file_store_corrupt_file_falls_back(tmp_path):
    store = JsonFileStore(tmp_path)
    store.set(targets_key(2025), "{broken")
    assert resolve_monthly_target(store, "deptA", 2025, 9, DEFAULTS) == 750_000


def test_apply_targets_for_month_switches_with_date():
    store = InMemoryStore()
    save_monthly_target(store, "input-print", 2025, 9, 1_500_000)
    items = default_items()

    september = apply_targets_for_month(store, items, date(2025, 9, 15))
    october = apply_targets_for_month(store, september, date(2025, 10, 1))

    by_id = {i.id: i for i in september}
    assert by_id["input-print"].monthly_target == 1_500_000
    assert by_id["input-solid-cont"].monthly_target == 2_000_000
    assert {i.id: i for i in october}["input-print"].monthly_target == 1_303_000
