import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from mindspend.core.config import settings
from mindspend.db.base import (
    BUDGETS,
    EXPENSES,
    NOTIFICATIONS,
    PROFILES,
    PUSH_SUBSCRIPTIONS,
    RECURRING_EXPENSES,
    SAVINGS_GOALS,
    Repository,
    item_key,
)

logger = logging.getLogger(__name__)


def default_table_names() -> Dict[str, str]:
    return {
        "users": settings.DYNAMO_TABLE_USERS,
        PROFILES: settings.DYNAMO_TABLE_PROFILES,
        EXPENSES: settings.DYNAMO_TABLE_EXPENSES,
        BUDGETS: settings.DYNAMO_TABLE_BUDGETS,
        RECURRING_EXPENSES: settings.DYNAMO_TABLE_RECURRING,
        SAVINGS_GOALS: settings.DYNAMO_TABLE_GOALS,
        NOTIFICATIONS: settings.DYNAMO_TABLE_NOTIFICATIONS,
        PUSH_SUBSCRIPTIONS: settings.DYNAMO_TABLE_PUSH,
    }


class DynamoRepository(Repository):
    """
    DynamoDB-backed repository. Every table uses user_id as its hash key;
    per-user collections add the collection's item key as range key.
    The users table needs an "email-index" GSI on email.
    """

    def __init__(self, dynamodb=None, table_names: Optional[Dict[str, str]] = None) -> None:
        self._dynamodb = dynamodb or boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)
        names = table_names or default_table_names()
        self._tables = {name: self._dynamodb.Table(table) for name, table in names.items()}

    def table(self, collection: str):
        return self._tables[collection]

    # Users

    def get_user_by_email(self, email: str):
        """Query the Users table by email through the email GSI."""
        try:
            response = self.table("users").query(
                IndexName="email-index",
                KeyConditionExpression=Key("email").eq(email),
            )
            return _from_dynamo(response["Items"][0]) if response["Items"] else None
        except ClientError as e:
            logger.error(f"get_user_by_email failed: {e.response['Error']['Message']}")
            return None

    def get_user_by_id(self, user_id: str):
        try:
            response = self.table("users").get_item(Key={"user_id": user_id})
            item = response.get("Item")
            return _from_dynamo(item) if item else None
        except ClientError as e:
            logger.error(f"get_user_by_id failed: {e.response['Error']['Message']}")
            return None

    def put_user(self, user_item: dict) -> bool:
        try:
            self.table("users").put_item(Item=_convert_for_dynamo(user_item))
            return True
        except ClientError as e:
            logger.error(f"put_user failed: {e.response['Error']['Message']}")
            return False

    # Per-user collections

    def put_item(self, collection: str, item: dict) -> bool:
        try:
            self.table(collection).put_item(Item=_convert_for_dynamo(item))
            return True
        except ClientError as e:
            logger.error(f"put_item on {collection} failed: {e.response['Error']['Message']}")
            return False

    def put_items(self, collection: str, items: List[dict]) -> bool:
        try:
            with self.table(collection).batch_writer() as batch:
                for item in items:
                    batch.put_item(Item=_convert_for_dynamo(item))
            return True
        except ClientError as e:
            logger.error(f"put_items on {collection} failed: {e.response['Error']['Message']}")
            return False

    def get_item(self, collection: str, user_id: str, item_id: str):
        try:
            response = self.table(collection).get_item(
                Key={"user_id": user_id, item_key(collection): item_id}
            )
            item = response.get("Item")
            return _from_dynamo(item) if item else None
        except ClientError as e:
            logger.error(f"get_item on {collection} failed: {e.response['Error']['Message']}")
            return None

    def list_items(self, collection: str, user_id: str) -> List[dict]:
        """Query every item of a user, following pagination."""
        items: List[dict] = []
        query_args: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(user_id)}
        try:
            while True:
                response = self.table(collection).query(**query_args)
                items.extend(_from_dynamo(item) for item in response["Items"])
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    return items
                query_args["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error(f"list_items on {collection} failed: {e.response['Error']['Message']}")
            return []

    def update_item(self, collection: str, user_id: str, item_id: str, updates: dict):
        """
        Apply partial updates to an item. Returns the updated item or None.
        """
        if not updates:
            return None

        update_expression_parts = []
        expression_attribute_values = {}
        expression_attribute_names = {}

        for idx, (key, value) in enumerate(updates.items()):
            placeholder = f"#f{idx}"
            value_placeholder = f":v{idx}"
            update_expression_parts.append(f"{placeholder} = {value_placeholder}")
            expression_attribute_names[placeholder] = key
            expression_attribute_values[value_placeholder] = value

        update_expression = "SET " + ", ".join(update_expression_parts)
        range_key = item_key(collection)

        try:
            response = self.table(collection).update_item(
                Key={"user_id": user_id, range_key: item_id},
                UpdateExpression=update_expression,
                ConditionExpression=f"attribute_exists({range_key})",
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=_convert_for_dynamo(expression_attribute_values),
                ReturnValues="ALL_NEW",
            )
            attributes = response.get("Attributes")
            return _from_dynamo(attributes) if attributes else None
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return None
            logger.error(f"update_item on {collection} failed: {e.response['Error']['Message']}")
            return None

    def delete_item(self, collection: str, user_id: str, item_id: str) -> bool:
        try:
            response = self.table(collection).delete_item(
                Key={"user_id": user_id, item_key(collection): item_id},
                ReturnValues="ALL_OLD",
            )
            return "Attributes" in response
        except ClientError as e:
            logger.error(f"delete_item on {collection} failed: {e.response['Error']['Message']}")
            return False

    def delete_all(self, collection: str, user_id: str) -> int:
        range_key = item_key(collection)
        items = self.list_items(collection, user_id)
        try:
            with self.table(collection).batch_writer() as batch:
                for item in items:
                    batch.delete_item(Key={"user_id": user_id, range_key: item[range_key]})
            return len(items)
        except ClientError as e:
            logger.error(f"delete_all on {collection} failed: {e.response['Error']['Message']}")
            return 0

    # Single-record collections

    def get_record(self, collection: str, user_id: str):
        try:
            response = self.table(collection).get_item(Key={"user_id": user_id})
            item = response.get("Item")
            return _from_dynamo(item) if item else None
        except ClientError as e:
            logger.error(f"get_record on {collection} failed: {e.response['Error']['Message']}")
            return None

    def upsert_record(self, collection: str, user_id: str, values: dict):
        existing = self.get_record(collection, user_id) or {}
        item = {**existing, **values, "user_id": user_id}
        try:
            self.table(collection).put_item(Item=_convert_for_dynamo(item))
            return item
        except ClientError as e:
            logger.error(f"upsert_record on {collection} failed: {e.response['Error']['Message']}")
            return None


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal for DynamoDB compatibility.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
