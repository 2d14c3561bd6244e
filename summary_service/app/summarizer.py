from __future__ import annotations

import logging
import time
from typing import Callable, Iterator

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from common.llm.factory import ChatModelConfig, create_chat_model

from .constants import (
    MAX_ATTEMPTS,
    MAX_INPUT_CHARS,
    OVERLOADED_MARKERS,
    RETRY_BASE_DELAY_SECONDS,
    UNTITLED,
)
from .exceptions import ProviderAuthError, ProviderConfigError, ProviderOverloadError
from .parser import ExtractedArticle
from .retry import call_with_retry, linear_backoff


logger = logging.getLogger(__name__)


SYSTEM_INSTRUCTION = """
あなたは Web 記事を要約するアシスタントです。
与えられた記事を3つの要点で簡潔に要約してください。
各要点は1〜2文でまとめてください。

【重要】入力された記事が英語やその他の言語で書かれていても、要約は必ず日本語で作成してください。

出力形式（必ず日本語で、次の3行のみ）:
1. （第一の要点）
2. （第二の要点）
3. （第三の要点）
"""

HUMAN_TEMPLATE = """記事タイトル: {title}

記事本文:
{body}"""

_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SYSTEM_INSTRUCTION),
        ("human", HUMAN_TEMPLATE),
    ]
)

_AUTH_STATUSES = frozenset({401, 403})


def _iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """langchain のラッパー例外の下にある SDK 例外まで辿る。"""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _status_of(exc: BaseException) -> int | None:
    candidates = (
        getattr(exc, "status_code", None),
        getattr(exc, "code", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    )
    for value in candidates:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def is_overloaded_error(exc: BaseException) -> bool:
    """provider の一時的な過負荷 (HTTP 503) かどうか。

    SDK 例外の status を優先し、取れない場合のみメッセージの
    "overloaded" / "503" で判定する。
    """
    for err in _iter_causes(exc):
        if _status_of(err) == 503:
            return True
        message = str(err).lower()
        if any(marker in message for marker in OVERLOADED_MARKERS):
            return True
    return False


def is_auth_error(exc: BaseException) -> bool:
    for err in _iter_causes(exc):
        if _status_of(err) in _AUTH_STATUSES:
            return True
        if "api key" in str(err).lower():
            return True
    return False


class ArticleSummarizer:
    """記事本文を 3 つの要点に要約する LLM クライアント。

    - 認証情報が無い場合は、ネットワークに触れる前に ProviderConfigError。
    - 過負荷エラーのみ最大 max_attempts 回まで線形バックオフで再試行する。
    """

    def __init__(
        self,
        config: ChatModelConfig,
        *,
        max_input_chars: int = MAX_INPUT_CHARS,
        max_attempts: int = MAX_ATTEMPTS,
        retry_base_delay: float = RETRY_BASE_DELAY_SECONDS,
        chat_model_factory: Callable[[ChatModelConfig], BaseChatModel] = create_chat_model,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._max_input_chars = max_input_chars
        self._max_attempts = max_attempts
        self._backoff = linear_backoff(retry_base_delay)
        self._chat_model_factory = chat_model_factory
        self._sleep = sleep
        self._chat_model: BaseChatModel | None = None
        self._output_parser = StrOutputParser()

    @property
    def model_name(self) -> str:
        return self._config.model

    def ensure_credential(self) -> None:
        if not self._config.has_credential():
            raise ProviderConfigError()

    def build_prompt_messages(self, title: str | None, body: str) -> list[BaseMessage]:
        return _PROMPT.format_messages(
            title=title or UNTITLED,
            body=body[: self._max_input_chars],
        )

    def _get_chat_model(self) -> BaseChatModel:
        if self._chat_model is None:
            self._chat_model = self._chat_model_factory(self._config)
        return self._chat_model

    def _generate(self, messages: list[BaseMessage]) -> str:
        response = self._get_chat_model().invoke(messages)
        return self._output_parser.invoke(response)

    def summarize(self, article: ExtractedArticle) -> str:
        self.ensure_credential()
        messages = self.build_prompt_messages(article.title, article.body_text)

        try:
            summary = call_with_retry(
                lambda: self._generate(messages),
                max_attempts=self._max_attempts,
                should_retry=is_overloaded_error,
                backoff=self._backoff,
                sleep=self._sleep,
            )
        except Exception as exc:
            logger.warning("summarization with model %s failed: %s", self._config.model, exc)
            if is_overloaded_error(exc):
                raise ProviderOverloadError() from exc
            if is_auth_error(exc):
                raise ProviderAuthError() from exc
            raise

        summary = summary.strip()
        if not summary:
            raise RuntimeError(f"model {self._config.model} returned an empty summary")
        return summary
