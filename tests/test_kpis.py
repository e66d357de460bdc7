from datetime import date

import pytest

from production_tracker.kpis import (
    classify_achievement,
    compute_item_metrics,
    compute_section_totals,
    days_in_month,
    get_section_items,
    parse_ftd,
    round_half_up,
)
from production_tracker.models import ProductionItem, Section


def make_item(id="dept-a", ftd="", target=0.0, previous=0.0, section=Section.INPUT):
    return ProductionItem(
        id=id, name=id, section=section, ftd=ftd,
        monthly_target=target, previous_mtd=previous,
    )


def test_round_half_up_rounds_halves_up_not_to_even():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert round_half_up(66666.666) == 66667


def test_round_half_up_non_finite_is_zero():
    assert round_half_up(float("nan")) == 0
    assert round_half_up(float("inf")) == 0


@pytest.mark.parametrize("year,month,expected", [
    (2025, 9, 30), (2025, 1, 31), (2024, 2, 29), (2025, 2, 28), (1900, 2, 28), (2000, 2, 29),
])
def test_days_in_month(year, month, expected):
    assert days_in_month(year, month) == expected


def test_parse_ftd_invalid_inputs_are_zero():
    assert parse_ftd("") == 0
    assert parse_ftd("abc") == 0
    assert parse_ftd(None) == 0
    assert parse_ftd("-5") == 0
    assert parse_ftd(" 1200 ") == 1200


def test_worked_example_day_15_of_30_day_month():
    item = make_item(ftd="40000", target=2_000_000, previous=1_050_000)
    m = compute_item_metrics(item, date(2025, 9, 15))
    assert m.target_per_day == 66667
    assert m.mtd == 1_090_000
    assert m.running_avg_per_day == 72667
    assert m.projected_monthly == 2_180_000
    assert m.achievement_percent == 60


@pytest.mark.parametrize("ftd", ["", "0", "junk"])
def test_no_ftd_leaves_mtd_equal_to_previous(ftd):
    item = make_item(ftd=ftd, target=300_000, previous=123_456)
    m = compute_item_metrics(item, date(2025, 9, 10))
    assert m.mtd == 123_456
    assert m.achievement_percent == 0


def test_zero_target_gives_zero_achievement():
    item = make_item(ftd="99999", target=0, previous=10)
    m = compute_item_metrics(item, date(2024, 2, 29))
    assert m.achievement_percent == 0
    assert m.target_per_day == 0


def test_leap_february_uses_29_days():
    item = make_item(ftd="100", target=2900, previous=0)
    m = compute_item_metrics(item, date(2024, 2, 1))
    assert m.target_per_day == 100
    assert m.achievement_percent == 100
    assert m.projected_monthly == 2900


def test_section_membership_uses_tag_not_id():
    items = [
        make_item(id="input-x", section=Section.BSR),
        make_item(id="bsr-y", section=Section.INPUT),
    ]
    assert [i.id for i in get_section_items(items, Section.INPUT)] == ["bsr-y"]
    assert [i.id for i in get_section_items(items, "bsr")] == ["input-x"]


def test_section_totals_sum_members_only():
    items = [
        make_item(id="a", ftd="100", target=3000, previous=500),
        make_item(id="b", ftd="bad", target=6000, previous=250),
        make_item(id="c", ftd="900", target=9000, previous=1000, section=Section.BSR),
    ]
    totals = compute_section_totals(items, Section.INPUT, date(2025, 9, 5))
    assert totals.ftd_sum == 100
    assert totals.monthly_target_sum == 9000
    assert totals.mtd == 850
    assert totals.target_per_day == 300
    assert totals.running_avg_per_day == 170
    assert totals.projected_monthly == 5100
    assert totals.achievement_percent == 33


def test_section_achievement_is_of_aggregate_not_average():
    items = [
        make_item(id="a", ftd="100", target=3000),   # 100% of 100/day
        make_item(id="b", ftd="0", target=27000),    # 0% of 900/day
    ]
    report_date = date(2025, 9, 1)
    per_item = [compute_item_metrics(i, report_date).achievement_percent for i in items]
    totals = compute_section_totals(items, Section.INPUT, report_date)
    assert sum(per_item) / len(per_item) == 50
    assert totals.achievement_percent == 10


def test_zero_target_section_has_zero_achievement():
    items = [
        make_item(id="s1", ftd="500", section=Section.BSR),
        make_item(id="s2", ftd="700", section=Section.BSR),
    ]
    totals = compute_section_totals(items, Section.BSR, date(2025, 9, 15))
    assert totals.achievement_percent == 0
    assert totals.ftd_sum == 1200


def test_empty_section_is_all_zero():
    totals = compute_section_totals([], Section.BSR, date(2025, 9, 15))
    assert totals.as_dict()["mtd"] == 0
    assert totals.achievement_percent == 0


@pytest.mark.parametrize("percent,band", [
    (150, "on_target"), (100, "on_target"), (99, "at_risk"),
    (80, "at_risk"), (79, "behind"), (0, "behind"),
])
def test_classify_achievement(percent, band):
    assert classify_achievement(percent) == band


def test_item_ftd_value_uses_shared_parser():
    from production_tracker.loaders import utils

    assert parse_ftd is utils.parse_ftd
    assert make_item(ftd="1,250").ftd_value == 1250
    assert make_item(ftd="-3").ftd_value == 0
