from datetime import date

import pytest

from finance_tracker.periods import (
    Period,
    available_years,
    default_comparison_years,
    months_of,
)


def test_period_bounds_for_leap_february():
    period = Period(2024, 2)
    assert period.first_day == date(2024, 2, 1)
    assert period.last_day == date(2024, 2, 29)
    assert period.days_in_month == 29


def test_shift_handles_year_transition():
    assert Period(2024, 1).previous() == Period(2023, 12)
    assert Period(2023, 12).next() == Period(2024, 1)
    assert Period(2024, 3).shift(-15) == Period(2022, 12)
    assert Period(2024, 3).shift(22) == Period(2026, 1)


def test_contains_uses_year_and_month_only():
    period = Period(2024, 3)
    assert period.contains(date(2024, 3, 31))
    assert not period.contains(date(2023, 3, 10))
    assert not period.contains(date(2024, 4, 1))


def test_parse_and_str_round_trip():
    assert Period.parse("2024-07") == Period(2024, 7)
    assert str(Period(2024, 7)) == "2024-07"
    with pytest.raises(ValueError):
        Period.parse("2024")
    with pytest.raises(ValueError):
        Period(2024, 13)


def test_periods_are_ordered():
    assert Period(2023, 12) < Period(2024, 1) < Period(2024, 2)


def test_months_of_year():
    months = months_of(2024)
    assert len(months) == 12
    assert months[0] == Period(2024, 1)
    assert months[-1] == Period(2024, 12)


def test_available_years_always_offer_current_and_previous_year():
    years = available_years([date(2021, 5, 1), date(2021, 6, 1)], today=date(2024, 8, 1))
    assert years == [2024, 2023, 2021]


def test_default_comparison_years_pick_two_newest():
    assert default_comparison_years([2025, 2024, 2021]) == (2024, 2025)
