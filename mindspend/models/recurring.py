import datetime as dt
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from mindspend.models.expense import Category
from mindspend.utils.analyzer import utc_today


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class RecurringExpenseCreate(BaseModel):
    amount: float = Field(gt=0)
    category: Category
    note: str = ""
    frequency: Frequency = Frequency.MONTHLY
    start_date: dt.date = Field(default_factory=utc_today)
    is_active: bool = True


class RecurringExpenseToggle(BaseModel):
    is_active: bool


class RecurringExpenseInDB(BaseModel):
    user_id: str
    recurring_id: str = Field(default_factory=lambda: str(uuid4()))
    amount: float
    category: Category
    note: str = ""
    frequency: Frequency
    start_date: dt.date
    next_date: dt.date
    is_active: bool = True


class RecurringExpensePublic(BaseModel):
    recurring_id: str
    amount: float
    category: Category
    note: str = ""
    frequency: Frequency
    start_date: dt.date
    next_date: dt.date
    is_active: bool
