from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from mindspend.models.expense import Category


class BudgetUpdate(BaseModel):
    monthly_budget: Optional[float] = Field(default=None, gt=0)
    # Keys must be known categories; unknown names are rejected with 422
    category_budgets: Optional[Dict[Category, float]] = None

    @field_validator("category_budgets")
    @classmethod
    def non_negative(cls, value):
        if value:
            for category, amount in value.items():
                if amount < 0:
                    raise ValueError(f"Budget for {category.value} must be positive")
        return value


class BudgetPublic(BaseModel):
    monthly_budget: float
    category_budgets: Dict[str, float] = {}
