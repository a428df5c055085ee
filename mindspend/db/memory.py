import copy
import threading
from collections import defaultdict
from typing import Dict, List, Optional

from mindspend.db.base import Repository, item_key


class MemoryRepository(Repository):
    """Dictionary-backed repository for local development and tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[str, dict] = {}
        # collection -> user_id -> item_id -> item
        self._items: Dict[str, Dict[str, Dict[str, dict]]] = defaultdict(lambda: defaultdict(dict))
        # collection -> user_id -> record
        self._records: Dict[str, Dict[str, dict]] = defaultdict(dict)

    def get_user_by_email(self, email: str) -> Optional[dict]:
        with self._lock:
            for user in self._users.values():
                if user["email"] == email:
                    return copy.deepcopy(user)
        return None

    def get_user_by_id(self, user_id: str) -> Optional[dict]:
        with self._lock:
            user = self._users.get(user_id)
            return copy.deepcopy(user) if user else None

    def put_user(self, user_item: dict) -> bool:
        with self._lock:
            self._users[user_item["user_id"]] = copy.deepcopy(user_item)
        return True

    def put_item(self, collection: str, item: dict) -> bool:
        key = item_key(collection)
        with self._lock:
            self._items[collection][item["user_id"]][item[key]] = copy.deepcopy(item)
        return True

    def put_items(self, collection: str, items: List[dict]) -> bool:
        for item in items:
            self.put_item(collection, item)
        return True

    def get_item(self, collection: str, user_id: str, item_id: str) -> Optional[dict]:
        item_key(collection)
        with self._lock:
            item = self._items[collection][user_id].get(item_id)
            return copy.deepcopy(item) if item else None

    def list_items(self, collection: str, user_id: str) -> List[dict]:
        item_key(collection)
        with self._lock:
            return [copy.deepcopy(item) for item in self._items[collection][user_id].values()]

    def update_item(self, collection: str, user_id: str, item_id: str, updates: dict) -> Optional[dict]:
        if not updates:
            return None
        item_key(collection)
        with self._lock:
            item = self._items[collection][user_id].get(item_id)
            if item is None:
                return None
            item.update(copy.deepcopy(updates))
            return copy.deepcopy(item)

    def delete_item(self, collection: str, user_id: str, item_id: str) -> bool:
        item_key(collection)
        with self._lock:
            return self._items[collection][user_id].pop(item_id, None) is not None

    def delete_all(self, collection: str, user_id: str) -> int:
        item_key(collection)
        with self._lock:
            removed = len(self._items[collection][user_id])
            self._items[collection][user_id] = {}
            return removed

    def get_record(self, collection: str, user_id: str) -> Optional[dict]:
        with self._lock:
            record = self._records[collection].get(user_id)
            return copy.deepcopy(record) if record else None

    def upsert_record(self, collection: str, user_id: str, values: dict) -> Optional[dict]:
        with self._lock:
            record = self._records[collection].setdefault(user_id, {"user_id": user_id})
            record.update(copy.deepcopy(values))
            return copy.deepcopy(record)
