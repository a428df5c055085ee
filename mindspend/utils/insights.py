"""
Rule-based spending insights.

Rules run in a fixed priority order and the first one that matches wins:
mood, weekly category, impulse notes, light day, mindful streak, and finally
a random encouragement.
"""
import random
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from mindspend.utils.analyzer import as_date, as_datetime, from_cents, to_cents

EMPTY_MESSAGE = "Start tracking your expenses to see insights! 📊"

MOOD_MESSAGES = {
    "Bored": "You tend to spend more when bored. Try a free hobby! 🎨",
    "Stressed": "Stressed spending detected. Take a deep breath first! 🧘",
    "Happy": "You celebrate with purchases! Balance is key 🎉",
}

WEEKLY_CATEGORY_MESSAGE = "Most of your spending this week was on {category}. 🍔"
IMPULSE_MESSAGE = "Spotted some impulse purchases. Sleep on it next time! 💭"
LIGHT_DAY_MESSAGE = "Light spending day! Keep it up 🌟"
STREAK_MESSAGE = "Three mindful spending days in a row! 🎯"

IMPULSE_WORDS = ("craving", "wanted", "impulse", "saw", "treat")

DOMINANT_MOOD_MIN = 3  # strictly more than this many
WEEKLY_EXPENSES_MIN = 3  # strictly more than this many
LIGHT_DAY_LIMIT = 20
MODERATE_DAY_LIMIT = 50

ENCOURAGEMENTS = [
    "Small cuts lead to big savings 💪",
    "Every penny tracked is a penny earned 🪙",
    "You're building better money habits! 🌱",
    "Awareness is the first step to change 👀",
    "Keep tracking, you're doing great! ⭐",
]

MOTIVATIONAL_MESSAGES = [
    "Small cuts lead to big savings 💪",
    "Try a no-spend day challenge! 🎯",
    "You're improving your habits one day at a time 🌟",
    "Mindful spending leads to mindful living 🧘",
    "Track today, thank yourself tomorrow 📈",
    "Financial wellness starts with awareness 💡",
    "Every dollar has a story, make it count 📖",
    "Progress over perfection! 🎨",
]


def _mood_insight(expenses: List[Dict[str, Any]]) -> Optional[str]:
    counts = Counter(exp.get("mood") for exp in expenses)
    # most_common keeps first-seen order among ties
    mood, count = counts.most_common(1)[0]
    if count > DOMINANT_MOOD_MIN:
        return MOOD_MESSAGES.get(mood)
    return None


def _weekly_category_insight(expenses: List[Dict[str, Any]], now: datetime) -> Optional[str]:
    week_ago = now - timedelta(days=7)
    last_7_days = [exp for exp in expenses if as_datetime(exp["created_at"]) > week_ago]
    if len(last_7_days) <= WEEKLY_EXPENSES_MIN:
        return None

    totals: Dict[str, int] = defaultdict(int)
    for exp in last_7_days:
        totals[exp["category"]] += to_cents(exp["amount"])
    top_category = max(totals, key=totals.get)
    return WEEKLY_CATEGORY_MESSAGE.format(category=top_category.lower())


def _impulse_insight(expenses: List[Dict[str, Any]]) -> Optional[str]:
    for exp in expenses:
        note = (exp.get("note") or "").lower()
        if any(word in note for word in IMPULSE_WORDS):
            return IMPULSE_MESSAGE
    return None


def _day_total(expenses: List[Dict[str, Any]], day) -> float:
    return from_cents(sum(to_cents(exp["amount"]) for exp in expenses if as_date(exp["date"]) == day))


def _light_day_insight(expenses: List[Dict[str, Any]], now: datetime) -> Optional[str]:
    today = [exp for exp in expenses if as_date(exp["date"]) == now.date()]
    if len(today) == 1 and float(today[0]["amount"]) < LIGHT_DAY_LIMIT:
        return LIGHT_DAY_MESSAGE
    return None


def _streak_insight(expenses: List[Dict[str, Any]], now: datetime) -> Optional[str]:
    days = [now.date() - timedelta(days=offset) for offset in range(3)]
    if all(_day_total(expenses, day) < MODERATE_DAY_LIMIT for day in days):
        return STREAK_MESSAGE
    return None


def generate_insight(
    expenses: List[Dict[str, Any]],
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> str:
    if not expenses:
        return EMPTY_MESSAGE

    now = now or datetime.utcnow()
    rules = (
        lambda: _mood_insight(expenses),
        lambda: _weekly_category_insight(expenses, now),
        lambda: _impulse_insight(expenses),
        lambda: _light_day_insight(expenses, now),
        lambda: _streak_insight(expenses, now),
    )
    for rule in rules:
        message = rule()
        if message:
            return message

    return (rng or random).choice(ENCOURAGEMENTS)


def motivational_message(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(MOTIVATIONAL_MESSAGES)
