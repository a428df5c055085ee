"""
AI-backed insights built on the chat completion client: expense analysis,
free-text questions, budget rating and category suggestions.
"""
import json
import logging
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from mindspend.models.expense import Category
from mindspend.utils.ai_client import (
    PAYMENT_REQUIRED,
    RATE_LIMITED,
    ChatCompletionClient,
    CompletionError,
)
from mindspend.utils.analyzer import SpendingAnalyzer, from_cents, sort_newest_first, to_cents
from mindspend.utils.budget import budget_score

logger = logging.getLogger(__name__)

RECENT_EXPENSE_LIMIT = 10

COACH_PROMPT = (
    "You are a mindful spending coach. Analyze expense data and provide personalized, actionable insights. "
    "Focus on patterns between spending and emotional states. Be encouraging but honest. "
    "Keep insights concise (2-3 sentences max) and actionable."
)
CHAT_PROMPT = (
    "You are a mindful spending coach answering questions about the user's own expenses. "
    "Only use the expense data provided. Be concise, encouraging and honest."
)
ADVISOR_PROMPT = "You are a helpful financial advisor. Provide ratings from A+ to F and brief, encouraging messages."
CATEGORY_PROMPT = (
    "You categorize personal expenses. Answer with exactly one category name from this list and nothing else: {categories}."
)

DEFAULT_INSIGHT = "Keep tracking your expenses mindfully!"
NO_DATA_RATING_MESSAGE = "No expense data available yet. Start tracking your expenses to get insights!"

# (HTTP status, error message returned by the API) per failure kind
ERROR_RESPONSES = {
    RATE_LIMITED: (429, "Rate limits exceeded, please try again later."),
    PAYMENT_REQUIRED: (402, "Payment required, please add credits to your workspace."),
}
GENERIC_ERROR_RESPONSE = (500, "AI gateway error")

# (user notice, insight shown instead) per failure kind
FALLBACKS = {
    RATE_LIMITED: (
        "Rate limit reached. Please try again in a moment.",
        "You're tracking your expenses well! Keep it up to discover more insights.",
    ),
    PAYMENT_REQUIRED: (
        "Credits needed. Please add credits to continue using AI insights.",
        "Add credits to unlock personalized AI insights about your spending.",
    ),
}
GENERIC_FALLBACK = (
    "Could not generate an AI insight right now.",
    "Keep tracking your expenses to unlock personalized insights!",
)


def error_response(error: CompletionError) -> Tuple[int, str]:
    return ERROR_RESPONSES.get(error.kind, GENERIC_ERROR_RESPONSE)


@dataclass
class InsightResult:
    insight: str
    source: str  # "ai" or "fallback"
    error: Optional[str] = None
    notice: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


def recent_expenses(expenses: List[Dict[str, Any]], limit: int = RECENT_EXPENSE_LIMIT) -> List[Dict[str, Any]]:
    return sort_newest_first(expenses)[:limit]


def expense_summary(expenses: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Prompt-ready summary: one line per expense plus category and mood totals."""
    lines = []
    mood_totals: Dict[str, int] = defaultdict(int)
    for e in expenses:
        lines.append(f"${float(e['amount']):.2f} on {e['category']} ({e.get('mood')}) - {e.get('note') or 'no note'}")
        mood_totals[e.get("mood")] += to_cents(e["amount"])
    return {
        "lines": "\n".join(lines),
        "category_totals": SpendingAnalyzer().category_totals(expenses),
        "mood_totals": {mood: from_cents(cents) for mood, cents in mood_totals.items()},
    }


def analyze_expenses(client: ChatCompletionClient, expenses: List[Dict[str, Any]]) -> str:
    summary = expense_summary(recent_expenses(expenses))
    user_prompt = f"""Analyze these expenses and provide ONE key personalized insight:

Recent expenses:
{summary['lines']}

Category totals: {json.dumps(summary['category_totals'])}
Mood when spending: {json.dumps(summary['mood_totals'])}

Give a brief, personalized insight that helps them understand their spending patterns and emotional triggers."""

    insight = client.generate_completion([
        {"role": "system", "content": COACH_PROMPT},
        {"role": "user", "content": user_prompt},
    ])
    return insight or DEFAULT_INSIGHT


def insight_with_fallback(client: ChatCompletionClient, expenses: List[Dict[str, Any]]) -> InsightResult:
    """AI insight, or a safe fallback sentence plus a notice when the gateway fails."""
    try:
        return InsightResult(insight=analyze_expenses(client, expenses), source="ai")
    except CompletionError as e:
        logger.warning(f"AI insight unavailable ({e.kind}): {e}")
        notice, insight = FALLBACKS.get(e.kind, GENERIC_FALLBACK)
        return InsightResult(insight=insight, source="fallback", error=e.kind, notice=notice)


def chat_about_expenses(client: ChatCompletionClient, expenses: List[Dict[str, Any]], question: str) -> str:
    summary = expense_summary(recent_expenses(expenses))
    user_prompt = f"""Recent expenses:
{summary['lines'] or 'none yet'}

Category totals: {json.dumps(summary['category_totals'])}
Mood when spending: {json.dumps(summary['mood_totals'])}

Question: {question}"""

    answer = client.generate_completion([
        {"role": "system", "content": CHAT_PROMPT},
        {"role": "user", "content": user_prompt},
    ])
    return answer or DEFAULT_INSIGHT


def rate_budget(
    client: ChatCompletionClient,
    expenses: List[Dict[str, Any]],
    monthly_budget: float,
    category_budgets: Optional[Dict[str, float]] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    if not expenses:
        return {"rating": "N/A", "message": NO_DATA_RATING_MESSAGE, "score": 0}

    analyzer = SpendingAnalyzer(today=today)
    month_expenses = analyzer.month_expenses(expenses)
    total_spent = analyzer.total(month_expenses)

    prompt = f"""Analyze this user's budget adherence and provide a concise rating:

Monthly Budget: ${monthly_budget:.2f}
Total Spent This Month: ${total_spent:.2f}
Category Budgets: {json.dumps(category_budgets or {})}
Actual Category Spending: {json.dumps(analyzer.category_totals(month_expenses))}
Number of Expenses: {len(month_expenses)}

Provide a rating from A+ to F and a brief personalized message (max 2 sentences) about their budget adherence. Be encouraging but honest."""

    rating = client.generate_completion([
        {"role": "system", "content": ADVISOR_PROMPT},
        {"role": "user", "content": prompt},
    ])
    return {
        "rating": rating,
        "totalSpent": total_spent,
        "monthlyBudget": monthly_budget,
        "score": budget_score(total_spent, monthly_budget),
    }


def parse_category(answer: str) -> Category:
    cleaned = answer.strip().strip(".").strip().lower()
    for category in Category:
        if category.value.lower() == cleaned:
            return category
    return Category.OTHER


def suggest_category(client: ChatCompletionClient, text: str) -> Category:
    categories = ", ".join(category.value for category in Category)
    answer = client.generate_completion([
        {"role": "system", "content": CATEGORY_PROMPT.format(categories=categories)},
        {"role": "user", "content": text},
    ])
    return parse_category(answer)
