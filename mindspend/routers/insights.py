"""
Insights Router
Rule-based insights plus the AI-backed analysis, chat and category suggestion endpoints
"""
import logging
from typing import Dict, NoReturn

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from mindspend.core.security import get_current_user_id
from mindspend.db.base import EXPENSES, Repository
from mindspend.db.repository import get_repository
from mindspend.utils.ai_client import ChatCompletionClient, CompletionError, get_completion_client
from mindspend.utils import ai_insights
from mindspend.utils.insights import generate_insight, motivational_message

router = APIRouter()
logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    question: str = Field(min_length=1, max_length=1000)


class CategoryRequest(BaseModel):
    text: str = Field(min_length=1, max_length=500)


def raise_for_completion_error(error: CompletionError) -> NoReturn:
    status_code, detail = ai_insights.error_response(error)
    logger.error(f"AI request failed ({error.kind}): {error}")
    raise HTTPException(status_code=status_code, detail=detail)


@router.get("/")
def heuristic_insight(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)) -> Dict:
    expenses = repo.list_items(EXPENSES, user_id)
    return {"insight": generate_insight(expenses)}


@router.get("/motivation")
def motivation() -> Dict:
    return {"message": motivational_message()}


@router.post("/analyze")
def analyze_expenses(
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
    client: ChatCompletionClient = Depends(get_completion_client),
) -> Dict:
    """AI insight over the 10 most recent expenses; gateway failures map to 429/402/500."""
    expenses = repo.list_items(EXPENSES, user_id)
    try:
        return {"insight": ai_insights.analyze_expenses(client, expenses)}
    except CompletionError as e:
        raise_for_completion_error(e)


@router.get("/ai")
def ai_insight(
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
    client: ChatCompletionClient = Depends(get_completion_client),
) -> Dict:
    """AI insight that degrades to a fallback sentence instead of failing."""
    expenses = repo.list_items(EXPENSES, user_id)
    if not expenses:
        return {"insight": "Add expenses to get personalized insights!", "source": "fallback"}
    return ai_insights.insight_with_fallback(client, expenses).to_dict()


@router.post("/chat")
def chat(
    request: ChatRequest,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
    client: ChatCompletionClient = Depends(get_completion_client),
) -> Dict:
    expenses = repo.list_items(EXPENSES, user_id)
    try:
        return {"answer": ai_insights.chat_about_expenses(client, expenses, request.question)}
    except CompletionError as e:
        raise_for_completion_error(e)


@router.post("/suggest-category")
def suggest_category(
    request: CategoryRequest,
    user_id: str = Depends(get_current_user_id),
    client: ChatCompletionClient = Depends(get_completion_client),
) -> Dict:
    try:
        return {"category": ai_insights.suggest_category(client, request.text).value}
    except CompletionError as e:
        raise_for_completion_error(e)
