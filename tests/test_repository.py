from decimal import Decimal

import pytest
from botocore.exceptions import ClientError

from mindspend.db.base import EXPENSES, PROFILES, SAVINGS_GOALS, item_key
from mindspend.db.dynamo import DynamoRepository, _convert_for_dynamo, _from_dynamo
from mindspend.db.memory import MemoryRepository


def test_item_key():
    assert item_key(EXPENSES) == "expense_id"
    with pytest.raises(ValueError):
        item_key("nonexistent")


def test_memory_items_are_scoped_per_user():
    repo = MemoryRepository()
    repo.put_item(EXPENSES, {"user_id": "u1", "expense_id": "e1", "amount": 5})
    repo.put_item(EXPENSES, {"user_id": "u2", "expense_id": "e2", "amount": 7})

    assert [e["expense_id"] for e in repo.list_items(EXPENSES, "u1")] == ["e1"]
    assert repo.get_item(EXPENSES, "u2", "e1") is None
    assert repo.update_item(EXPENSES, "u2", "e1", {"amount": 1}) is None
    assert repo.delete_item(EXPENSES, "u2", "e1") is False
    assert repo.get_item(EXPENSES, "u1", "e1")["amount"] == 5


def test_memory_returns_copies():
    repo = MemoryRepository()
    repo.put_item(EXPENSES, {"user_id": "u1", "expense_id": "e1", "amount": 5})
    repo.get_item(EXPENSES, "u1", "e1")["amount"] = 99
    assert repo.get_item(EXPENSES, "u1", "e1")["amount"] == 5


def test_memory_delete_all_and_records():
    repo = MemoryRepository()
    repo.put_items(SAVINGS_GOALS, [{"user_id": "u1", "goal_id": str(i)} for i in range(3)])
    assert repo.delete_all(SAVINGS_GOALS, "u1") == 3
    assert repo.list_items(SAVINGS_GOALS, "u1") == []

    assert repo.get_record(PROFILES, "u1") is None
    repo.upsert_record(PROFILES, "u1", {"display_name": "Ann"})
    assert repo.upsert_record(PROFILES, "u1", {"avatar_url": "x"}) == {
        "user_id": "u1",
        "display_name": "Ann",
        "avatar_url": "x",
    }


def test_dynamo_conversion_helpers():
    item = {"amount": 12.5, "tags": [1.25, "a"], "nested": {"value": 3.0}, "count": 2}
    converted = _convert_for_dynamo(item)
    assert converted["amount"] == Decimal("12.5")
    assert converted["tags"][0] == Decimal("1.25")
    assert converted["nested"]["value"] == Decimal("3.0")

    restored = _from_dynamo(converted)
    assert restored == {"amount": 12.5, "tags": [1.25, "a"], "nested": {"value": 3}, "count": 2}
    assert isinstance(restored["nested"]["value"], int)


class FakeTable:
    def __init__(self, pages=None, error_code=None):
        self.pages = list(pages or [])
        self.error_code = error_code
        self.calls = []

    def query(self, **kwargs):
        self.calls.append(("query", kwargs))
        return self.pages.pop(0)

    def update_item(self, **kwargs):
        self.calls.append(("update_item", kwargs))
        if self.error_code:
            raise ClientError({"Error": {"Code": self.error_code, "Message": "failed"}}, "UpdateItem")
        values = {name: kwargs["ExpressionAttributeValues"][f":v{i}"] for i, name in enumerate(kwargs["ExpressionAttributeNames"].values())}
        return {"Attributes": {**kwargs["Key"], **values}}


class FakeDynamo:
    def __init__(self, table):
        self.table = table

    def Table(self, name):
        return self.table


def test_dynamo_list_items_follows_pagination():
    table = FakeTable(pages=[
        {"Items": [{"expense_id": "e1", "amount": Decimal("5.5")}], "LastEvaluatedKey": {"expense_id": "e1"}},
        {"Items": [{"expense_id": "e2", "amount": Decimal("2")}]},
    ])
    repo = DynamoRepository(dynamodb=FakeDynamo(table), table_names={EXPENSES: "expenses"})

    items = repo.list_items(EXPENSES, "u1")

    assert items == [{"expense_id": "e1", "amount": 5.5}, {"expense_id": "e2", "amount": 2}]
    assert table.calls[1][1]["ExclusiveStartKey"] == {"expense_id": "e1"}


def test_dynamo_update_item():
    table = FakeTable()
    repo = DynamoRepository(dynamodb=FakeDynamo(table), table_names={EXPENSES: "expenses"})

    updated = repo.update_item(EXPENSES, "u1", "e1", {"amount": 9.99, "note": "taxi"})

    kwargs = table.calls[0][1]
    assert kwargs["UpdateExpression"] == "SET #f0 = :v0, #f1 = :v1"
    assert kwargs["ConditionExpression"] == "attribute_exists(expense_id)"
    assert kwargs["ExpressionAttributeValues"][":v0"] == Decimal("9.99")
    assert updated == {"user_id": "u1", "expense_id": "e1", "amount": 9.99, "note": "taxi"}


def test_dynamo_update_missing_item_returns_none():
    table = FakeTable(error_code="ConditionalCheckFailedException")
    repo = DynamoRepository(dynamodb=FakeDynamo(table), table_names={EXPENSES: "expenses"})
    assert repo.update_item(EXPENSES, "u1", "missing", {"amount": 1.0}) is None
