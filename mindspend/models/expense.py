import datetime as dt
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from mindspend.utils.analyzer import utc_today


class Category(str, Enum):
    FOOD = "Food"
    GROCERIES = "Groceries"
    TRAVEL = "Travel"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    HEALTHCARE = "Healthcare"
    UTILITIES = "Utilities"
    EDUCATION = "Education"
    RENT = "Rent"
    OTHER = "Other"


class Mood(str, Enum):
    HAPPY = "Happy"
    STRESSED = "Stressed"
    BORED = "Bored"
    NEUTRAL = "Neutral"


class ExpenseCreate(BaseModel):
    amount: float = Field(gt=0)
    category: Category
    mood: Mood = Mood.NEUTRAL
    note: str = ""
    date: dt.date = Field(default_factory=utc_today)
    title: Optional[str] = None
    receipt_url: Optional[str] = None


class ExpenseUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, gt=0)
    category: Optional[Category] = None
    mood: Optional[Mood] = None
    note: Optional[str] = None
    date: Optional[dt.date] = None
    title: Optional[str] = None
    receipt_url: Optional[str] = None


class ExpenseInDB(BaseModel):
    user_id: str
    expense_id: str = Field(default_factory=lambda: str(uuid4()))
    amount: float
    category: Category
    mood: Mood
    note: str = ""
    date: dt.date
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    title: Optional[str] = None
    receipt_url: Optional[str] = None


class ExpensePublic(BaseModel):
    expense_id: str
    amount: float
    category: Category
    mood: Mood
    note: str = ""
    date: dt.date
    created_at: dt.datetime
    title: Optional[str] = None
    receipt_url: Optional[str] = None
