from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from pydantic import BaseModel

from ..exceptions import SummaryServiceError
from ..fetcher import FetchedDocument
from ..parser import ExtractedArticle, extract_article
from ..responses import build_failure, build_success
from ..validator import validate_request_payload


logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def fetch(self, url: str) -> FetchedDocument: ...


class Summarizer(Protocol):
    def ensure_credential(self) -> None: ...

    def summarize(self, article: ExtractedArticle) -> str: ...


Extractor = Callable[[str, str], ExtractedArticle]


class SummarizePipeline:
    """1 リクエスト分の要約パイプライン。

    - 入力 URL の検証
    - 認証情報の事前チェック
    - HTML の取得
    - 本文の抽出
    - LLM による要約
    - 成功/失敗レスポンスへの変換

    例外はすべてこの境界で捕捉し、(status, レスポンス DTO) として返す。
    """

    def __init__(
        self,
        *,
        fetcher: Fetcher,
        summarizer: Summarizer,
        extractor: Extractor = extract_article,
    ) -> None:
        self._fetcher = fetcher
        self._summarizer = summarizer
        self._extractor = extractor

    def run(self, payload: Any) -> tuple[int, BaseModel]:
        url: str | None = None
        try:
            url = validate_request_payload(payload)
            return self._summarize_url(url)
        except SummaryServiceError as exc:
            logger.warning(
                "summarize request failed url=%s category=%s: %s",
                url,
                exc.category.value,
                exc,
                extra={"url": url, "error_category": exc.category.value},
            )
            return build_failure(exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("unexpected error while summarizing url=%s", url)
            return build_failure(exc)

    def _summarize_url(self, url: str) -> tuple[int, BaseModel]:
        logger.info("handling summarize request url=%s", url)

        # 1. 認証情報チェック (ネットワークアクセス前)
        self._summarizer.ensure_credential()

        # 2. HTML 取得
        document = self._fetcher.fetch(url)

        # 3. 本文抽出
        article = self._extractor(document.html, url)

        # 4. LLM 要約
        summary = self._summarizer.summarize(article)

        logger.info(
            "successfully summarized url=%s final_url=%s title=%r body_len=%d summary_len=%d",
            url,
            document.final_url,
            article.title,
            len(article.body_text),
            len(summary),
        )
        return build_success(url, article, summary)
