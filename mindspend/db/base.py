"""
Repository interface

Every record belongs to exactly one user. Per-user collections hold many items
keyed by (user_id, item key); single-record collections hold one item per user.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

EXPENSES = "expenses"
RECURRING_EXPENSES = "recurring_expenses"
SAVINGS_GOALS = "savings_goals"
NOTIFICATIONS = "notifications"
PUSH_SUBSCRIPTIONS = "push_subscriptions"
BUDGETS = "budgets"
PROFILES = "profiles"

# Range key of each per-user collection
ITEM_KEYS = {
    EXPENSES: "expense_id",
    RECURRING_EXPENSES: "recurring_id",
    SAVINGS_GOALS: "goal_id",
    NOTIFICATIONS: "notification_id",
    PUSH_SUBSCRIPTIONS: "subscription_id",
}

SINGLE_RECORD_COLLECTIONS = (BUDGETS, PROFILES)


class Repository(ABC):
    # Users
    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def put_user(self, user_item: Dict[str, Any]) -> bool:
        ...

    # Per-user collections
    @abstractmethod
    def put_item(self, collection: str, item: Dict[str, Any]) -> bool:
        """Insert or replace an item. The item carries user_id and its range key."""

    @abstractmethod
    def put_items(self, collection: str, items: List[Dict[str, Any]]) -> bool:
        ...

    @abstractmethod
    def get_item(self, collection: str, user_id: str, item_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def list_items(self, collection: str, user_id: str) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def update_item(
        self, collection: str, user_id: str, item_id: str, updates: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Apply partial updates. Returns the updated item, or None if it does not exist."""

    @abstractmethod
    def delete_item(self, collection: str, user_id: str, item_id: str) -> bool:
        ...

    @abstractmethod
    def delete_all(self, collection: str, user_id: str) -> int:
        ...

    # Single-record collections
    @abstractmethod
    def get_record(self, collection: str, user_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def upsert_record(self, collection: str, user_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge values into the user's record, creating it on first write."""


def item_key(collection: str) -> str:
    try:
        return ITEM_KEYS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection: {collection}")
