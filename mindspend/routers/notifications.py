"""
Notifications Router
Notification inbox (list, mark read, delete) and browser push subscriptions
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from mindspend.core.security import get_current_user_id
from mindspend.db.base import NOTIFICATIONS, PUSH_SUBSCRIPTIONS, Repository
from mindspend.db.repository import get_repository
from mindspend.models.notification import (
    NotificationCreate,
    NotificationInDB,
    NotificationPublic,
    PushSubscriptionCreate,
    PushSubscriptionInDB,
    PushSubscriptionPublic,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[NotificationPublic])
def list_notifications(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    notifications = repo.list_items(NOTIFICATIONS, user_id)
    return sorted(notifications, key=lambda n: n["created_at"], reverse=True)


@router.post("/", response_model=NotificationPublic, status_code=status.HTTP_201_CREATED)
def create_notification(
    notification: NotificationCreate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    notification_db = NotificationInDB(user_id=user_id, **notification.model_dump())
    if not repo.put_item(NOTIFICATIONS, notification_db.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Failed to save notification")
    return NotificationPublic(**notification_db.model_dump())


@router.post("/{notification_id}/read", response_model=NotificationPublic)
def mark_as_read(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    updated = repo.update_item(NOTIFICATIONS, user_id, notification_id, {"is_read": True})
    if not updated:
        raise HTTPException(status_code=404, detail="Notification not found")
    return updated


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    if not repo.delete_item(NOTIFICATIONS, user_id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/push/subscriptions", response_model=List[PushSubscriptionPublic])
def list_push_subscriptions(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    return repo.list_items(PUSH_SUBSCRIPTIONS, user_id)


@router.post("/push/subscriptions", response_model=PushSubscriptionPublic, status_code=status.HTTP_201_CREATED)
def subscribe(
    payload: PushSubscriptionCreate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    """Register a device push subscription. Delivery happens outside this service."""
    subscription = PushSubscriptionInDB(user_id=user_id, subscription=payload.subscription)
    if not repo.put_item(PUSH_SUBSCRIPTIONS, subscription.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Could not enable notifications")
    logger.info(f"Push subscription {subscription.subscription_id} registered for user {user_id}")
    return PushSubscriptionPublic(**subscription.model_dump())


@router.delete("/push/subscriptions")
def unsubscribe(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    """Remove every push subscription of the current user."""
    removed = repo.delete_all(PUSH_SUBSCRIPTIONS, user_id)
    return {"removed": removed}
