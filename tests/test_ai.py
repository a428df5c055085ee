from datetime import date, datetime

import pytest
import requests

from mindspend.models.expense import Category
from mindspend.utils import ai_insights
from mindspend.utils.ai_client import (
    PAYMENT_REQUIRED,
    RATE_LIMITED,
    UPSTREAM,
    ChatCompletionClient,
    CompletionError,
)


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.requests = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.exc:
            raise self.exc
        return self.response


def make_client(session):
    return ChatCompletionClient(api_key="test-key", url="https://gateway.test/v1/chat", model="test-model", session=session)


def completion_payload(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def test_successful_completion():
    session = FakeSession(FakeResponse(200, completion_payload("  Cook at home twice a week.  ")))
    messages = [{"role": "user", "content": "hi"}]

    assert make_client(session).generate_completion(messages) == "Cook at home twice a week."
    request = session.requests[0]
    assert request["url"] == "https://gateway.test/v1/chat"
    assert request["headers"]["Authorization"] == "Bearer test-key"
    assert request["json"] == {"model": "test-model", "messages": messages, "stream": False}


def test_empty_choices_yield_empty_text():
    session = FakeSession(FakeResponse(200, {"choices": []}))
    assert make_client(session).generate_completion([]) == ""


@pytest.mark.parametrize(
    "status_code, kind",
    [(429, RATE_LIMITED), (402, PAYMENT_REQUIRED), (500, UPSTREAM), (404, UPSTREAM)],
)
def test_status_codes_map_to_error_kinds(status_code, kind):
    session = FakeSession(FakeResponse(status_code, text="nope"))
    with pytest.raises(CompletionError) as exc_info:
        make_client(session).generate_completion([])
    assert exc_info.value.kind == kind
    assert exc_info.value.status_code == status_code


def test_network_failure_is_upstream():
    session = FakeSession(exc=requests.ConnectionError("connection refused"))
    with pytest.raises(CompletionError) as exc_info:
        make_client(session).generate_completion([])
    assert exc_info.value.kind == UPSTREAM


def test_invalid_json_is_upstream():
    session = FakeSession(FakeResponse(200, None))
    with pytest.raises(CompletionError) as exc_info:
        make_client(session).generate_completion([])
    assert exc_info.value.kind == UPSTREAM


@pytest.mark.parametrize(
    "payload",
    [["not", "an", "object"], {"choices": ["text"]}, {"choices": [{"message": "text"}]}, {"choices": [{"message": {"content": 42}}]}],
)
def test_unexpected_payload_is_upstream(payload):
    session = FakeSession(FakeResponse(200, payload))
    with pytest.raises(CompletionError) as exc_info:
        make_client(session).generate_completion([])
    assert exc_info.value.kind == UPSTREAM


def test_missing_api_key_never_calls_gateway():
    session = FakeSession(FakeResponse(200, completion_payload("hi")))
    client = ChatCompletionClient(api_key="", session=session)
    with pytest.raises(CompletionError) as exc_info:
        client.generate_completion([])
    assert exc_info.value.kind == UPSTREAM
    assert session.requests == []


def test_error_response_mapping():
    assert ai_insights.error_response(CompletionError(RATE_LIMITED)) == (429, "Rate limits exceeded, please try again later.")
    assert ai_insights.error_response(CompletionError(PAYMENT_REQUIRED))[0] == 402
    assert ai_insights.error_response(CompletionError(UPSTREAM))[0] == 500


def test_analyze_uses_ten_most_recent(completion, expense_factory):
    expenses = [
        expense_factory(i + 1, note=f"note-{i}", created_at=datetime(2024, 6, 1 + i), expense_id=str(i))
        for i in range(12)
    ]
    assert ai_insights.analyze_expenses(completion, expenses) == completion.reply

    prompt = completion.calls[0][1]["content"]
    assert completion.calls[0][0]["content"] == ai_insights.COACH_PROMPT
    assert "note-11" in prompt
    assert "note-2" in prompt
    assert "- note-1\n" not in prompt
    assert "note-0" not in prompt


def test_analyze_with_empty_reply(completion, expense_factory):
    completion.reply = ""
    assert ai_insights.analyze_expenses(completion, [expense_factory(5)]) == ai_insights.DEFAULT_INSIGHT


@pytest.mark.parametrize("kind", [RATE_LIMITED, PAYMENT_REQUIRED, UPSTREAM])
def test_insight_with_fallback(completion, expense_factory, kind):
    completion.error_kind = kind
    result = ai_insights.insight_with_fallback(completion, [expense_factory(5)])
    notice, insight = ai_insights.FALLBACKS.get(kind, ai_insights.GENERIC_FALLBACK)
    assert result.source == "fallback"
    assert result.to_dict() == {"insight": insight, "source": "fallback", "error": kind, "notice": notice}


def test_insight_with_fallback_success(completion, expense_factory):
    result = ai_insights.insight_with_fallback(completion, [expense_factory(5)])
    assert result.to_dict() == {"insight": completion.reply, "source": "ai"}


def test_rate_budget_without_expenses(completion):
    result = ai_insights.rate_budget(completion, [], 500)
    assert result["rating"] == "N/A"
    assert result["score"] == 0
    assert completion.calls == []


def test_rate_budget(completion, expense_factory):
    completion.reply = "B+ Solid month."
    expenses = [expense_factory(250, day=date(2024, 6, 3)), expense_factory(900, day=date(2024, 5, 3))]
    result = ai_insights.rate_budget(completion, expenses, 500, {"Food": 300}, today=date(2024, 6, 15))
    assert result == {"rating": "B+ Solid month.", "totalSpent": 250.0, "monthlyBudget": 500, "score": 90}


def test_chat_about_expenses(completion, expense_factory):
    answer = ai_insights.chat_about_expenses(completion, [expense_factory(5, note="bagel")], "Where does my money go?")
    assert answer == completion.reply
    assert "Where does my money go?" in completion.calls[0][1]["content"]
    assert "bagel" in completion.calls[0][1]["content"]


@pytest.mark.parametrize(
    "answer, category",
    [("Groceries", Category.GROCERIES), (" transportation.\n", Category.TRANSPORTATION), ("I think food", Category.OTHER)],
)
def test_parse_category(answer, category):
    assert ai_insights.parse_category(answer) == category


def test_suggest_category(completion):
    completion.reply = "Utilities"
    assert ai_insights.suggest_category(completion, "electricity bill") == Category.UTILITIES
    assert "Healthcare" in completion.calls[0][0]["content"]
