from datetime import date, datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field


class SavingsGoalCreate(BaseModel):
    name: str = Field(min_length=1)
    target_amount: float = Field(gt=0)
    current_amount: float = Field(default=0.0, ge=0)
    deadline: Optional[date] = None
    icon: str = "🎯"


class SavingsGoalUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    target_amount: Optional[float] = Field(default=None, gt=0)
    current_amount: Optional[float] = Field(default=None, ge=0)
    deadline: Optional[date] = None
    icon: Optional[str] = None


class Contribution(BaseModel):
    amount: float = Field(gt=0)


class SavingsGoalInDB(BaseModel):
    user_id: str
    goal_id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    target_amount: float
    current_amount: float = 0.0
    deadline: Optional[date] = None
    icon: str = "🎯"
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class SavingsGoalPublic(BaseModel):
    goal_id: str
    name: str
    target_amount: float
    current_amount: float
    deadline: Optional[date] = None
    icon: str
    created_at: str
    updated_at: str

    @computed_field
    @property
    def progress(self) -> float:
        return round(self.current_amount / self.target_amount * 100, 2)

    @computed_field
    @property
    def remaining(self) -> float:
        return round(self.target_amount - self.current_amount, 2)
