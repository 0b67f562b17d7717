from datetime import date

import pytest

from core import inspection_rules as rules
from core import labels


@pytest.mark.parametrize(
    "statuses, expected",
    [
        (["good"] * 6 + ["damaged"], "critical"),
        (["damaged"] + ["needs_repair"] * 6, "critical"),
        (["good"] * 5 + ["needs_repair"] * 2, "needs_attention"),
        (["good"] * 7, "good"),
        ([], "good"),
    ],
)
def test_derive_overall_status(statuses, expected):
    assert rules.derive_overall_status(statuses) == expected


def test_derive_overall_status_accepts_generators():
    items = [{"status": "good"}, {"status": "needs_repair"}]
    assert rules.derive_overall_status(i["status"] for i in items) == "needs_attention"


@pytest.mark.parametrize(
    "passed, total, expected",
    [
        (5, 7, 71),
        (7, 7, 100),
        (0, 7, 0),
        (1, 8, 13),  # 12.5 rounds up
        (3, 8, 38),  # 37.5 rounds up
        (0, 0, 0),
    ],
)
def test_pass_rate(passed, total, expected):
    assert rules.pass_rate(passed, total) == expected


@pytest.mark.parametrize(
    "rate, band",
    [(100, "good"), (80, "good"), (79, "warning"), (60, "warning"), (59, "critical"), (0, "critical")],
)
def test_pass_rate_band(rate, band):
    assert rules.pass_rate_band(rate) == band


def test_count_passed_only_counts_good():
    assert rules.count_passed(["good", "damaged", "good", "needs_repair"]) == 2


def test_expiry_flag():
    today = date(2025, 6, 1)
    assert rules.expiry_flag(date(2025, 5, 31), today) == "expired"
    assert rules.expiry_flag(date(2025, 6, 1), today) == "expiring_soon"
    assert rules.expiry_flag(date(2025, 7, 1), today) == "expiring_soon"  # 30 days
    assert rules.expiry_flag(date(2025, 7, 2), today) is None


def test_days_until_expiry_is_negative_when_past():
    assert rules.days_until_expiry(date(2025, 1, 1), date(2025, 1, 11)) == -10


def test_expiry_window_is_ninety_days():
    assert rules.expiry_window(date(2025, 1, 1)) == (date(2025, 1, 1), date(2025, 4, 1))


def test_month_bounds_rolls_over_december():
    assert rules.month_bounds(date(2025, 12, 15)) == (date(2025, 12, 1), date(2026, 1, 1))
    assert rules.month_bounds(date(2025, 2, 3)) == (date(2025, 2, 1), date(2025, 3, 1))


def test_year_bounds():
    assert rules.year_bounds(date(2025, 7, 4)) == (date(2025, 1, 1), date(2026, 1, 1))


def test_labels_fall_back_for_unknown_values():
    assert labels.apar_type_label("co2") == "CO2"
    assert labels.overall_status_label("needs_attention") == "Perlu Perhatian"
    assert labels.item_type_label("safety_pin") == "Pin Pengaman"
    assert labels.apar_status_label("bogus") == labels.UNKNOWN_LABEL
    assert labels.role_label(None) == "Petugas"
    assert labels.role_label("admin") == "Administrator"


def test_item_status_icon():
    assert labels.item_status_icon("good") == "✔"
    assert labels.item_status_icon("damaged") == "✘"
    assert labels.item_status_icon("needs_repair") == "✘"
    assert labels.item_status_icon("other") == "?"
