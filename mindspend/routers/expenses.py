import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status

from mindspend.core.config import settings
from mindspend.core.security import get_current_user_id
from mindspend.db.base import EXPENSES, Repository
from mindspend.db.repository import get_repository
from mindspend.models.expense import Category, ExpenseCreate, ExpenseInDB, ExpensePublic, ExpenseUpdate, Mood
from mindspend.utils import export
from mindspend.utils.analyzer import SpendingAnalyzer, sort_newest_first
from mindspend.utils.sample_data import generate_sample_expenses
from mindspend.utils.storage import FileStorage, get_storage, receipt_key

router = APIRouter()
logger = logging.getLogger(__name__)

EXPORT_MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json",
    "pdf": "application/pdf",
}

CLEARABLE_FIELDS = ("title", "receipt_url")


@router.post("/", response_model=ExpensePublic, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: ExpenseCreate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    expense_db = ExpenseInDB(user_id=user_id, **expense.model_dump())
    if not repo.put_item(EXPENSES, expense_db.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Failed to save expense")
    return ExpensePublic(**expense_db.model_dump())


@router.get("/", response_model=List[ExpensePublic])
def list_expenses(
    category: Optional[Category] = None,
    mood: Optional[Mood] = None,
    min_amount: Optional[float] = Query(default=None, ge=0),
    max_amount: Optional[float] = Query(default=None, ge=0),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    """
    List expenses newest first. Every filter is optional; amount and date
    bounds are inclusive.
    """
    expenses = SpendingAnalyzer.filter_expenses(
        repo.list_items(EXPENSES, user_id),
        category=category.value if category else None,
        mood=mood.value if mood else None,
        min_amount=min_amount,
        max_amount=max_amount,
        start_date=start_date,
        end_date=end_date,
    )
    return sort_newest_first(expenses)


@router.post("/receipts", status_code=status.HTTP_201_CREATED)
def upload_receipt(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    storage: FileStorage = Depends(get_storage),
):
    """Upload a receipt image; pass the returned URL as receipt_url when creating the expense."""
    content = file.file.read()
    if len(content) > settings.RECEIPT_MAX_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large. Max size is 5MB")

    file.file.seek(0)
    url = storage.upload(receipt_key(user_id, file.filename), file.file, file.content_type or "application/octet-stream")
    if not url:
        raise HTTPException(status_code=500, detail="Upload failed")
    return {"receipt_url": url}


@router.get("/export")
def export_expenses(
    format: str = Query(default="csv", pattern="^(csv|json|pdf)$"),
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    expenses = sort_newest_first(repo.list_items(EXPENSES, user_id))
    if not expenses:
        raise HTTPException(status_code=404, detail="No data to export")

    if format == "csv":
        content = export.expenses_to_csv(expenses)
    elif format == "json":
        content = export.expenses_to_json(expenses)
    else:
        content = export.expenses_to_pdf(expenses)

    logger.info(f"Exported {len(expenses)} expenses as {format} for user {user_id}")
    return Response(
        content=content,
        media_type=EXPORT_MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{export.export_filename(format)}"'},
    )


@router.post("/sample", status_code=status.HTTP_201_CREATED)
def generate_sample_data(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    """Replace the user's expenses with generated demo data."""
    removed = repo.delete_all(EXPENSES, user_id)
    expenses = generate_sample_expenses(user_id)
    if not repo.put_items(EXPENSES, expenses):
        raise HTTPException(status_code=500, detail="Failed to generate sample data")
    return {"removed": removed, "created": len(expenses)}


@router.get("/{expense_id}", response_model=ExpensePublic)
def get_expense(expense_id: str, user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    expense = repo.get_item(EXPENSES, user_id, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@router.put("/{expense_id}", response_model=ExpensePublic)
def update_expense(
    expense_id: str,
    expense_update: ExpenseUpdate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    # title and receipt_url may be cleared with null; other fields may not
    mutable_fields = {
        key: value
        for key, value in expense_update.model_dump(mode="json", exclude_unset=True).items()
        if value is not None or key in CLEARABLE_FIELDS
    }
    if not mutable_fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = repo.update_item(EXPENSES, user_id, expense_id, mutable_fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Expense not found")
    return updated


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: str, user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    if not repo.delete_item(EXPENSES, user_id, expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
