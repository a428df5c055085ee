from datetime import datetime
from enum import Enum
from typing import Any, Dict
from uuid import uuid4

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


class NotificationCreate(BaseModel):
    title: str
    message: str
    type: NotificationType = NotificationType.INFO


class NotificationInDB(BaseModel):
    user_id: str
    notification_id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    message: str
    type: NotificationType
    is_read: bool = False
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class NotificationPublic(BaseModel):
    notification_id: str
    title: str
    message: str
    type: NotificationType
    is_read: bool
    created_at: str


class PushSubscriptionCreate(BaseModel):
    # Device payload as produced by PushSubscription.toJSON() in the browser
    subscription: Dict[str, Any]


class PushSubscriptionInDB(BaseModel):
    user_id: str
    subscription_id: str = Field(default_factory=lambda: str(uuid4()))
    subscription: Dict[str, Any]
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class PushSubscriptionPublic(BaseModel):
    subscription_id: str
    subscription: Dict[str, Any]
    created_at: str
