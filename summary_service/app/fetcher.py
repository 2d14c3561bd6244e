from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from .constants import BROWSER_HEADERS, FETCH_TIMEOUT_SECONDS
from .exceptions import UpstreamFetchError


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FetchedDocument:
    url: str
    final_url: str
    status_code: int
    html: str


class DocumentFetcher:
    """ブラウザ相当のヘッダで対象ページの HTML を 1 回だけ取得する。

    リダイレクトは自動で追従する。このレイヤではリトライしない。
    """

    def __init__(
        self,
        *,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._headers = dict(headers or BROWSER_HEADERS)
        self._transport = transport

    def fetch(self, url: str) -> FetchedDocument:
        try:
            with httpx.Client(
                headers=self._headers,
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = client.get(url)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            logger.warning("failed to connect to %s: %s", url, exc)
            raise UpstreamFetchError(f"URLへの接続に失敗しました: {exc}") from exc

        if not resp.is_success:
            logger.warning(
                "unexpected status from %s: %d %s",
                url,
                resp.status_code,
                resp.reason_phrase,
            )
            raise UpstreamFetchError(
                f"ページの取得に失敗しました (ステータス: {resp.status_code})",
                status=resp.status_code,
            )

        return FetchedDocument(
            url=url,
            final_url=str(resp.url),
            status_code=resp.status_code,
            html=resp.text,
        )
