from __future__ import annotations

from typing import Callable

import httpx
import pytest
from langchain_core.messages import AIMessage, BaseMessage

from common.llm.factory import ChatModelConfig, LlmProvider
from summary_service.app.config import AppConfig, FetchConfig, SummarizeConfig


ARTICLE_URL = "https://example.com/article"
ARTICLE_TITLE = "Understanding Connection Pools"

THREE_POINT_SUMMARY = (
    "1. コネクションプールは接続の再利用でレイテンシを下げる。\n"
    "2. プールサイズはワークロードに合わせて調整する必要がある。\n"
    "3. タイムアウトと監視を組み合わせて枯渇を防ぐ。"
)

ARTICLE_HTML = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{ARTICLE_TITLE}</title>
  <meta property="og:title" content="{ARTICLE_TITLE}">
</head>
<body>
  <nav><a href="/">Home</a> <a href="/about">About</a></nav>
  <article>
    <h1>{ARTICLE_TITLE}</h1>
    <p>Connection pools keep a set of open database connections ready for reuse, so that each
    request does not have to pay the cost of a new TCP handshake and authentication round trip.
    This matters most for services that handle many short requests per second.</p>
    <p>Choosing the pool size is a balancing act. A pool that is too small makes requests queue
    while waiting for a free connection, while a pool that is too large can overwhelm the database
    server with concurrent sessions and increase memory pressure on both sides.</p>
    <p>Timeouts are the last line of defence. Every checkout from the pool should have an upper
    bound, and pool metrics such as wait time and active connections should be exported so that
    exhaustion is detected before it turns into an outage for the whole service.</p>
    <p>In practice, teams start with a conservative default, measure under realistic load, and
    adjust gradually. Revisiting the configuration after every major traffic change keeps the
    pool aligned with how the application is actually used in production.</p>
  </article>
  <footer>Copyright Example Inc.</footer>
</body>
</html>
"""

EMPTY_HTML = "<!DOCTYPE html><html><head><title>Empty</title></head><body></body></html>"


class FakeProviderError(Exception):
    """SDK 例外の代わり。status_code は任意。"""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class FakeChatModel:
    """応答 (文字列) か例外を順番に返すチャットモデル。"""

    def __init__(self, responses: list[str | Exception]) -> None:
        self._responses = list(responses)
        self.calls: list[list[BaseMessage]] = []

    def invoke(self, messages: list[BaseMessage]) -> AIMessage:
        self.calls.append(messages)
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return AIMessage(content=item)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class CountingTransport(httpx.MockTransport):
    """リクエスト回数を数える httpx.MockTransport."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_handler)


def build_chat_config(api_key: str | None = "test-api-key") -> ChatModelConfig:
    return ChatModelConfig(
        provider=LlmProvider.GOOGLE,
        model="test-model",
        temperature=0.3,
        api_key=api_key,
    )


def build_app_config(api_key: str | None = "test-api-key") -> AppConfig:
    return AppConfig(
        llm=build_chat_config(api_key),
        fetch=FetchConfig(timeout=5.0),
        summarize=SummarizeConfig(
            max_input_chars=50_000,
            max_attempts=3,
            retry_base_delay=2.0,
        ),
    )


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
