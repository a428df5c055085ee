from typing import Dict

from fastapi import APIRouter, Depends

from mindspend.core.security import get_current_user_id
from mindspend.db.base import EXPENSES, Repository
from mindspend.db.repository import get_repository
from mindspend.utils.analyzer import SpendingAnalyzer

router = APIRouter()


@router.get("/summary")
def spending_summary(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)) -> Dict:
    """
    Dashboard numbers: today/week/month totals, category totals, the last
    7 days and the last 8 weeks of spending.
    """
    expenses = repo.list_items(EXPENSES, user_id)
    return SpendingAnalyzer().summary(expenses)
