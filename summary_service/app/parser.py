from __future__ import annotations

import json
from dataclasses import dataclass

import trafilatura
from bs4 import BeautifulSoup

from .constants import MIN_TEXT_LENGTH
from .exceptions import ExtractionError


TOO_SHORT_MESSAGE = "記事の内容が短すぎます"


@dataclass(frozen=True, slots=True)
class ExtractedArticle:
    title: str | None
    body_text: str


def _extract_meta_title(html: str) -> str | None:
    """trafilatura がタイトルを取れなかった場合の og:title / <title> フォールバック。"""
    soup = BeautifulSoup(html, "html.parser")

    og_title = soup.find("meta", attrs={"property": "og:title"})
    if og_title and og_title.get("content"):
        content = str(og_title["content"]).strip()
        if content:
            return content

    if soup.title and soup.title.string:
        title = soup.title.string.strip()
        if title:
            return title

    return None


def extract_article(html: str, url: str | None = None) -> ExtractedArticle:
    """HTML から記事タイトルと本文テキストを抽出する。

    本文の抽出は trafilatura に任せる。記事構造が見つからない場合や
    本文が MIN_TEXT_LENGTH 文字未満の場合は ExtractionError を送出する。
    """
    raw = trafilatura.extract(
        html,
        url=url,
        output_format="json",
        with_metadata=True,
        include_comments=False,
    )
    if not raw:
        raise ExtractionError()

    data = json.loads(raw)
    text = (data.get("text") or "").strip()
    if not text:
        raise ExtractionError()

    if len(text) < MIN_TEXT_LENGTH:
        raise ExtractionError(TOO_SHORT_MESSAGE)

    title = (data.get("title") or "").strip() or _extract_meta_title(html)
    return ExtractedArticle(title=title, body_text=text)
