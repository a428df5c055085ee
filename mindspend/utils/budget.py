"""
Budget threshold evaluation

Compares month-to-date spending against the monthly budget and the
per-category budgets and classifies each into an alert band.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from mindspend.utils.analyzer import SpendingAnalyzer


class BudgetBand(str, Enum):
    NONE = "none"
    ON_TRACK = "on_track"  # at most 50% used
    ALERT = "alert"  # 80% to 85%
    WARNING = "warning"  # 90% to 100%
    EXCEEDED = "exceeded"  # 100% and above

    @property
    def is_alert(self) -> bool:
        return self in (BudgetBand.ALERT, BudgetBand.WARNING, BudgetBand.EXCEEDED)


BAND_MESSAGES = {
    BudgetBand.ON_TRACK: "✨ Great job! You're staying within budget.",
    BudgetBand.ALERT: "⚡ You've used {percent:.0f}% of your {label} budget.",
    BudgetBand.WARNING: "⚡ Close to budget limit! Be mindful.",
    BudgetBand.EXCEEDED: "⚠️ Budget exceeded! Time to review spending.",
}


def percent_used(spent: float, budget: float) -> float:
    if budget <= 0:
        return 0.0
    return spent / budget * 100


def classify(spent: float, budget: float) -> BudgetBand:
    if budget <= 0:
        return BudgetBand.NONE

    percent = percent_used(spent, budget)
    if percent >= 100:
        return BudgetBand.EXCEEDED
    if percent >= 90:
        return BudgetBand.WARNING
    if 80 <= percent < 85:
        return BudgetBand.ALERT
    if percent <= 50 and spent > 0:
        return BudgetBand.ON_TRACK
    return BudgetBand.NONE


@dataclass
class BudgetStatus:
    label: str
    spent: float
    budget: float
    remaining: float
    percent: float
    band: BudgetBand
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["band"] = self.band.value
        data["alert"] = self.band.is_alert
        return data


def budget_status(label: str, spent: float, budget: float) -> BudgetStatus:
    band = classify(spent, budget)
    percent = percent_used(spent, budget)
    template = BAND_MESSAGES.get(band)
    return BudgetStatus(
        label=label,
        spent=round(spent, 2),
        budget=round(budget, 2),
        remaining=round(budget - spent, 2),
        percent=round(percent, 1),
        band=band,
        message=template.format(percent=percent, label=label) if template else None,
    )


def evaluate_budget(
    expenses: List[Dict[str, Any]],
    monthly_budget: float,
    category_budgets: Optional[Dict[str, float]] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Evaluate the current month against the overall and per-category budgets."""
    analyzer = SpendingAnalyzer(today=today)
    month_expenses = analyzer.month_expenses(expenses)
    month_total = analyzer.total(month_expenses)
    category_totals = analyzer.category_totals(month_expenses)

    categories: List[BudgetStatus] = []
    for category, budget in (category_budgets or {}).items():
        if budget > 0:
            categories.append(budget_status(category, category_totals.get(category, 0.0), budget))

    overall = budget_status("monthly", month_total, monthly_budget)
    alerts = [status for status in [overall, *categories] if status.band.is_alert]
    return {
        "overall": overall.to_dict(),
        "categories": [status.to_dict() for status in categories],
        "alerts": [status.to_dict() for status in alerts],
    }


def budget_score(spent: float, budget: float) -> int:
    """0-100 adherence score; spending over budget costs one point per percent over."""
    ratio = percent_used(spent, budget)
    if ratio > 100:
        score = max(0.0, 100 - (ratio - 100))
    else:
        score = 100 - ratio * 0.2
    return round(score)
