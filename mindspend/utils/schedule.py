"""
Recurring-expense schedule arithmetic.

Month and year steps clamp to the last day of the target month
(2024-01-31 + 1 month = 2024-02-29). Multi-period steps are measured from the
start date, so 2024-01-31 + 2 months is 2024-03-31 rather than 2024-03-29.
Due schedules are never turned into expenses here; only next_date is tracked.
"""
from datetime import date

from dateutil.relativedelta import relativedelta

from mindspend.models.recurring import Frequency

STEPS = {
    Frequency.DAILY: relativedelta(days=1),
    Frequency.WEEKLY: relativedelta(weeks=1),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.YEARLY: relativedelta(years=1),
}


def next_occurrence(start: date, frequency: Frequency, periods: int = 1) -> date:
    if periods < 0:
        raise ValueError("periods must not be negative")
    return start + STEPS[Frequency(frequency)] * periods
