from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from mindspend.core.security import get_current_user_id
from mindspend.db.base import RECURRING_EXPENSES, Repository
from mindspend.db.repository import get_repository
from mindspend.models.recurring import (
    RecurringExpenseCreate,
    RecurringExpenseInDB,
    RecurringExpensePublic,
    RecurringExpenseToggle,
)
from mindspend.utils.schedule import next_occurrence

router = APIRouter()


@router.get("/", response_model=List[RecurringExpensePublic])
def list_recurring_expenses(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    items = repo.list_items(RECURRING_EXPENSES, user_id)
    return sorted(items, key=lambda item: item["next_date"])


@router.post("/", response_model=RecurringExpensePublic, status_code=status.HTTP_201_CREATED)
def create_recurring_expense(
    recurring: RecurringExpenseCreate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    recurring_db = RecurringExpenseInDB(
        user_id=user_id,
        next_date=next_occurrence(recurring.start_date, recurring.frequency),
        **recurring.model_dump(),
    )
    if not repo.put_item(RECURRING_EXPENSES, recurring_db.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Failed to save recurring expense")
    return RecurringExpensePublic(**recurring_db.model_dump())


@router.patch("/{recurring_id}", response_model=RecurringExpensePublic)
def toggle_recurring_expense(
    recurring_id: str,
    toggle: RecurringExpenseToggle,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    updated = repo.update_item(RECURRING_EXPENSES, user_id, recurring_id, {"is_active": toggle.is_active})
    if not updated:
        raise HTTPException(status_code=404, detail="Recurring expense not found")
    return updated


@router.delete("/{recurring_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recurring_expense(
    recurring_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    if not repo.delete_item(RECURRING_EXPENSES, user_id, recurring_id):
        raise HTTPException(status_code=404, detail="Recurring expense not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
