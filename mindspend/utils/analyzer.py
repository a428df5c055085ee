from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional


def utc_today() -> date:
    """Calendar day used for every "today": the same UTC clock as created_at."""
    return datetime.utcnow().date()


def to_cents(amount: Any) -> int:
    return int(round(float(amount) * 100))


def from_cents(cents: int) -> float:
    return cents / 100


def as_date(value: Any) -> date:
    """Accept a date, datetime or ISO string and return the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if len(text) > 10:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)


def as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00")).replace(tzinfo=None)


def start_of_week(today: date) -> date:
    # Weeks start on Sunday
    return today - timedelta(days=(today.weekday() + 1) % 7)


def start_of_month(today: date) -> date:
    return today.replace(day=1)


def sort_newest_first(expenses: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(expenses, key=lambda exp: as_datetime(exp["created_at"]), reverse=True)


class SpendingAnalyzer:
    """
    Derived views over a user's expense collection: totals, per-category
    breakdowns and the daily/weekly series shown on the dashboard.

    Sums are accumulated in integer cents so per-category totals always add
    up to the overall total.
    """

    def __init__(self, today: Optional[date] = None) -> None:
        self._today = today

    @property
    def today(self) -> date:
        return self._today or utc_today()

    def total(self, expenses: Iterable[Dict[str, Any]]) -> float:
        return from_cents(sum(to_cents(exp.get("amount", 0)) for exp in expenses))

    def category_totals(self, expenses: Iterable[Dict[str, Any]]) -> Dict[str, float]:
        totals: Dict[str, int] = defaultdict(int)
        for exp in expenses:
            totals[exp["category"]] += to_cents(exp.get("amount", 0))
        return {cat: from_cents(cents) for cat, cents in totals.items()}

    def since(self, expenses: Iterable[Dict[str, Any]], start: date) -> List[Dict[str, Any]]:
        return [exp for exp in expenses if as_date(exp["date"]) >= start]

    def today_total(self, expenses: Iterable[Dict[str, Any]]) -> float:
        return self.total(exp for exp in expenses if as_date(exp["date"]) == self.today)

    def week_total(self, expenses: Iterable[Dict[str, Any]]) -> float:
        return self.total(self.since(expenses, start_of_week(self.today)))

    def month_expenses(self, expenses: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self.since(expenses, start_of_month(self.today))

    def month_total(self, expenses: Iterable[Dict[str, Any]]) -> float:
        return self.total(self.month_expenses(expenses))

    def daily_series(self, expenses: List[Dict[str, Any]], days: int = 7) -> List[Dict[str, Any]]:
        """Spending per day for the last `days` days, oldest first."""
        by_day: Dict[date, int] = defaultdict(int)
        for exp in expenses:
            by_day[as_date(exp["date"])] += to_cents(exp.get("amount", 0))

        series = []
        for offset in range(days - 1, -1, -1):
            day = self.today - timedelta(days=offset)
            series.append({
                "date": day.isoformat(),
                "name": day.strftime("%a"),
                "amount": from_cents(by_day.get(day, 0)),
            })
        return series

    def weekly_series(self, expenses: List[Dict[str, Any]], weeks: int = 8) -> List[Dict[str, Any]]:
        """
        Spending bucketed by whole weeks before today. "Week {weeks}" is the
        current week; anything older than `weeks` weeks or dated in the future
        is left out.
        """
        buckets = [0] * weeks
        for exp in expenses:
            weeks_ago = (self.today - as_date(exp["date"])).days // 7
            if 0 <= weeks_ago < weeks:
                buckets[weeks - 1 - weeks_ago] += to_cents(exp.get("amount", 0))
        return [
            {"week": f"Week {index + 1}", "amount": from_cents(cents)}
            for index, cents in enumerate(buckets)
        ]

    @staticmethod
    def week_over_week(series: List[Dict[str, Any]]) -> float:
        current = series[-1]["amount"] if series else 0
        previous = series[-2]["amount"] if len(series) > 1 else 0
        if previous <= 0:
            return 0.0
        return round((current - previous) / previous * 100, 1)

    @staticmethod
    def filter_expenses(
        expenses: Iterable[Dict[str, Any]],
        category: Optional[str] = None,
        mood: Optional[str] = None,
        min_amount: Optional[float] = None,
        max_amount: Optional[float] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Filter on every given criterion. Date and amount bounds are inclusive."""
        result = []
        for exp in expenses:
            amount = float(exp.get("amount", 0))
            exp_date = as_date(exp["date"])
            if category and exp["category"] != category:
                continue
            if mood and exp.get("mood") != mood:
                continue
            if min_amount is not None and amount < min_amount:
                continue
            if max_amount is not None and amount > max_amount:
                continue
            if start_date and exp_date < start_date:
                continue
            if end_date and exp_date > end_date:
                continue
            result.append(exp)
        return result

    def summary(self, expenses: List[Dict[str, Any]]) -> Dict[str, Any]:
        if not expenses:
            return {
                "total": 0.0,
                "today_total": 0.0,
                "week_total": 0.0,
                "month_total": 0.0,
                "category_totals": {},
                "daily": self.daily_series([]),
                "weekly": self.weekly_series([]),
                "week_over_week": 0.0,
                "expense_count": 0,
            }

        weekly = self.weekly_series(expenses)
        return {
            "total": self.total(expenses),
            "today_total": self.today_total(expenses),
            "week_total": self.week_total(expenses),
            "month_total": self.month_total(expenses),
            "category_totals": self.category_totals(expenses),
            "daily": self.daily_series(expenses),
            "weekly": weekly,
            "week_over_week": self.week_over_week(weekly),
            "expense_count": len(expenses),
        }
