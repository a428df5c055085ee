import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException

from mindspend.core.config import settings
from mindspend.core.security import get_current_user_id
from mindspend.db.base import BUDGETS, EXPENSES, Repository
from mindspend.db.repository import get_repository
from mindspend.models.budget import BudgetPublic, BudgetUpdate
from mindspend.routers.insights import raise_for_completion_error
from mindspend.utils.ai_client import ChatCompletionClient, CompletionError, get_completion_client
from mindspend.utils.ai_insights import rate_budget
from mindspend.utils.budget import evaluate_budget

router = APIRouter()
logger = logging.getLogger(__name__)


def load_budget(repo: Repository, user_id: str) -> BudgetPublic:
    record = repo.get_record(BUDGETS, user_id) or {}
    return BudgetPublic(
        monthly_budget=record.get("monthly_budget", settings.DEFAULT_MONTHLY_BUDGET),
        category_budgets=record.get("category_budgets", {}),
    )


@router.get("/", response_model=BudgetPublic)
def get_budget(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    return load_budget(repo, user_id)


@router.put("/", response_model=BudgetPublic)
def update_budget(
    update: BudgetUpdate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    """Upsert the monthly total and/or the per-category breakdown."""
    values = update.model_dump(mode="json", exclude_none=True)
    if not values:
        raise HTTPException(status_code=400, detail="No fields to update")

    if repo.upsert_record(BUDGETS, user_id, values) is None:
        raise HTTPException(status_code=500, detail="Failed to save budget")
    return load_budget(repo, user_id)


@router.get("/status")
def budget_status(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)) -> Dict:
    """Current month against the overall and per-category budgets, with alert bands."""
    budget = load_budget(repo, user_id)
    expenses = repo.list_items(EXPENSES, user_id)
    return evaluate_budget(expenses, budget.monthly_budget, budget.category_budgets)


@router.get("/rating")
def budget_rating(
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
    client: ChatCompletionClient = Depends(get_completion_client),
) -> Dict:
    budget = load_budget(repo, user_id)
    expenses = repo.list_items(EXPENSES, user_id)
    try:
        return rate_budget(client, expenses, budget.monthly_budget, budget.category_budgets)
    except CompletionError as e:
        raise_for_completion_error(e)
