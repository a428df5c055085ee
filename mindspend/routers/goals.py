import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from mindspend.core.security import get_current_user_id
from mindspend.db.base import SAVINGS_GOALS, Repository
from mindspend.db.repository import get_repository
from mindspend.models.goal import (
    Contribution,
    SavingsGoalCreate,
    SavingsGoalInDB,
    SavingsGoalPublic,
    SavingsGoalUpdate,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[SavingsGoalPublic])
def list_goals(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    goals = repo.list_items(SAVINGS_GOALS, user_id)
    return sorted(goals, key=lambda goal: goal["created_at"], reverse=True)


@router.post("/", response_model=SavingsGoalPublic, status_code=status.HTTP_201_CREATED)
def create_goal(
    goal: SavingsGoalCreate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    goal_db = SavingsGoalInDB(user_id=user_id, **goal.model_dump())
    if not repo.put_item(SAVINGS_GOALS, goal_db.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Failed to save goal")
    return SavingsGoalPublic(**goal_db.model_dump())


@router.put("/{goal_id}", response_model=SavingsGoalPublic)
def update_goal(
    goal_id: str,
    goal_update: SavingsGoalUpdate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    # deadline may be cleared with null; other fields may not
    updates = {
        key: value
        for key, value in goal_update.model_dump(mode="json", exclude_unset=True).items()
        if value is not None or key == "deadline"
    }
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    updates["updated_at"] = datetime.utcnow().isoformat()
    updated = repo.update_item(SAVINGS_GOALS, user_id, goal_id, updates)
    if not updated:
        raise HTTPException(status_code=404, detail="Goal not found")
    return updated


@router.post("/{goal_id}/contribute", response_model=SavingsGoalPublic)
def contribute(
    goal_id: str,
    contribution: Contribution,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    """Add a contribution to current_amount."""
    goal = repo.get_item(SAVINGS_GOALS, user_id, goal_id)
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")

    new_amount = round(float(goal["current_amount"]) + contribution.amount, 2)
    updated = repo.update_item(
        SAVINGS_GOALS,
        user_id,
        goal_id,
        {"current_amount": new_amount, "updated_at": datetime.utcnow().isoformat()},
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Goal not found")
    if new_amount >= float(goal["target_amount"]):
        logger.info(f"Goal {goal_id} reached for user {user_id}")
    return updated


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(goal_id: str, user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    if not repo.delete_item(SAVINGS_GOALS, user_id, goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
