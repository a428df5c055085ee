"""
Demo data generator: 12-20 expenses per month over the last six months.
"""
import calendar
import random
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from dateutil.relativedelta import relativedelta

from mindspend.models.expense import Category, ExpenseInDB, Mood
from mindspend.utils.analyzer import utc_today

MONTHS = 6
MIN_PER_MONTH = 12
MAX_PER_MONTH = 20

EXPENSE_EXAMPLES = {
    Category.FOOD: [
        ("Dinner at Italian restaurant", 40, 80),
        ("Sushi takeout", 35, 60),
        ("Pizza delivery", 20, 35),
        ("Morning coffee", 4, 8),
        ("Lunch at food truck", 12, 18),
    ],
    Category.GROCERIES: [
        ("Weekly grocery shopping", 80, 150),
        ("Farmers market produce", 25, 50),
        ("Bulk items from Costco", 100, 200),
        ("Quick store run", 15, 30),
        ("Organic vegetables", 20, 40),
    ],
    Category.TRAVEL: [
        ("Flight to New York", 200, 500),
        ("Hotel booking", 150, 300),
        ("Airbnb weekend getaway", 180, 350),
        ("Train tickets", 40, 80),
        ("Airport parking", 25, 60),
    ],
    Category.TRANSPORTATION: [
        ("Uber to office", 12, 25),
        ("Gas station fill-up", 40, 70),
        ("Monthly metro pass", 80, 120),
        ("Parking garage", 15, 30),
        ("Car wash", 10, 25),
    ],
    Category.SHOPPING: [
        ("New running shoes", 60, 140),
        ("Work clothes", 50, 150),
        ("Electronics accessory", 30, 100),
        ("Home decor items", 40, 120),
        ("Book purchase", 15, 35),
    ],
    Category.ENTERTAINMENT: [
        ("Movie tickets", 20, 40),
        ("Concert tickets", 60, 150),
        ("Streaming subscription", 10, 20),
        ("Video game purchase", 40, 70),
        ("Museum admission", 15, 30),
    ],
    Category.HEALTHCARE: [
        ("Doctor visit copay", 30, 60),
        ("Pharmacy prescription", 15, 50),
        ("Dental cleaning", 80, 150),
        ("Gym membership", 40, 80),
        ("Vitamins and supplements", 20, 45),
    ],
    Category.UTILITIES: [
        ("Electricity bill", 60, 120),
        ("Water bill", 30, 60),
        ("Internet service", 50, 90),
        ("Mobile phone bill", 40, 80),
        ("Gas heating", 50, 100),
    ],
    Category.EDUCATION: [
        ("Online course subscription", 30, 100),
        ("Textbook purchase", 50, 150),
        ("Workshop registration", 80, 200),
        ("Professional certification", 200, 500),
        ("School supplies", 25, 60),
    ],
    Category.RENT: [
        ("Monthly rent payment", 800, 1500),
        ("Security deposit", 1000, 2000),
        ("Renters insurance", 20, 50),
        ("HOA fees", 100, 300),
        ("Storage unit rental", 60, 150),
    ],
    Category.OTHER: [
        ("Birthday gift", 30, 80),
        ("Charity donation", 25, 100),
        ("Pet supplies", 30, 70),
        ("Hair salon", 40, 100),
        ("Miscellaneous expense", 15, 50),
    ],
}


def generate_sample_expenses(
    user_id: str,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> List[Dict[str, Any]]:
    rng = rng or random.Random()
    today = today or utc_today()
    categories = list(Category)
    moods = list(Mood)

    expenses = []
    for month in range(MONTHS):
        first = today.replace(day=1) - relativedelta(months=month)
        days_in_month = calendar.monthrange(first.year, first.month)[1]

        for _ in range(rng.randint(MIN_PER_MONTH, MAX_PER_MONTH)):
            category = rng.choice(categories)
            title, low, high = rng.choice(EXPENSE_EXAMPLES[category])
            expense_date = first.replace(day=rng.randint(1, days_in_month))
            expense = ExpenseInDB(
                user_id=user_id,
                title=title,
                amount=round(rng.uniform(low, high), 2),
                category=category,
                mood=rng.choice(moods),
                date=expense_date,
                created_at=datetime(expense_date.year, expense_date.month, expense_date.day),
            )
            expenses.append(expense.model_dump(mode="json"))
    return expenses
