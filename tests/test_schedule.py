from datetime import date

import pytest

from mindspend.models.recurring import Frequency
from mindspend.utils.schedule import next_occurrence


def test_monthly_clamps_to_end_of_month():
    assert next_occurrence(date(2024, 1, 31), Frequency.MONTHLY) == date(2024, 2, 29)
    assert next_occurrence(date(2023, 1, 31), Frequency.MONTHLY) == date(2023, 2, 28)


def test_multiple_periods_are_anchored_to_start():
    assert next_occurrence(date(2024, 1, 31), Frequency.MONTHLY, periods=2) == date(2024, 3, 31)


def test_yearly_from_leap_day():
    assert next_occurrence(date(2024, 2, 29), Frequency.YEARLY) == date(2025, 2, 28)


def test_daily_and_weekly():
    assert next_occurrence(date(2024, 12, 31), Frequency.DAILY) == date(2025, 1, 1)
    assert next_occurrence(date(2024, 2, 26), Frequency.WEEKLY) == date(2024, 3, 4)


def test_frequency_given_as_string():
    assert next_occurrence(date(2024, 5, 15), "monthly") == date(2024, 6, 15)


def test_zero_periods_returns_start():
    assert next_occurrence(date(2024, 5, 15), Frequency.WEEKLY, periods=0) == date(2024, 5, 15)


def test_negative_periods_rejected():
    with pytest.raises(ValueError):
        next_occurrence(date(2024, 5, 15), Frequency.DAILY, periods=-1)
