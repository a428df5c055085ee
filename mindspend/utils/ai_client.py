"""
Chat-completion gateway client

Single-shot calls to an OpenAI-compatible chat completion endpoint.
No retries, no streaming and no caching.
"""
import logging
from functools import lru_cache
from typing import Dict, List, Optional

import requests

from mindspend.core.config import settings

logger = logging.getLogger(__name__)

RATE_LIMITED = "rate_limited"
PAYMENT_REQUIRED = "payment_required"
UPSTREAM = "upstream"


class CompletionError(Exception):
    """Raised when the gateway does not return a completion."""

    def __init__(self, kind: str, message: str = "", status_code: Optional[int] = None) -> None:
        super().__init__(message or kind)
        self.kind = kind
        self.status_code = status_code


class ChatCompletionClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.AI_API_KEY
        self.url = url or settings.AI_GATEWAY_URL
        self.model = model or settings.AI_MODEL
        self.timeout = timeout or settings.AI_TIMEOUT_SECONDS
        self._session = session or requests.Session()

    def generate_completion(self, messages: List[Dict[str, str]]) -> str:
        """
        Send the message list and return the completion text ("" if the
        gateway answered without content).

        Raises:
            CompletionError: kind is rate_limited for 429, payment_required
                for 402 and upstream for anything else.
        """
        if not self.api_key:
            raise CompletionError(UPSTREAM, "AI_API_KEY is not configured")

        try:
            response = self._session.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={"model": self.model, "messages": messages, "stream": False},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"AI gateway request failed: {e}")
            raise CompletionError(UPSTREAM, str(e))

        if response.status_code == 429:
            raise CompletionError(RATE_LIMITED, "Rate limited by AI gateway", 429)
        if response.status_code == 402:
            raise CompletionError(PAYMENT_REQUIRED, "AI gateway requires payment", 402)
        if not 200 <= response.status_code < 300:
            logger.error(f"AI gateway error: {response.status_code} {response.text}")
            raise CompletionError(UPSTREAM, "AI gateway error", response.status_code)

        try:
            data = response.json()
        except ValueError:
            raise CompletionError(UPSTREAM, "AI gateway returned invalid JSON", response.status_code)

        try:
            choices = data.get("choices") or [{}]
            content = (choices[0].get("message") or {}).get("content") or ""
            return content.strip()
        except (AttributeError, IndexError, KeyError, TypeError):
            logger.error(f"AI gateway returned an unexpected payload: {data!r}")
            raise CompletionError(UPSTREAM, "AI gateway returned an unexpected payload", response.status_code)


@lru_cache()
def get_completion_client() -> ChatCompletionClient:
    return ChatCompletionClient()
