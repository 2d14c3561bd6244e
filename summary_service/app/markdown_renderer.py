from __future__ import annotations

import html

import markdown
from bs4 import BeautifulSoup


_EXTENSIONS = ["nl2br", "sane_lists"]


def render_summary_html(text: str) -> str:
    """LLM が返した Markdown の要約を表示用の HTML 断片に変換する。

    モデル出力は信頼できないので、生の HTML は先にエスケープし、
    変換後の要素からは属性 (href, onclick など) をすべて取り除く。
    """
    if not text or not text.strip():
        return ""

    rendered = markdown.markdown(html.escape(text, quote=False), extensions=_EXTENSIONS)

    soup = BeautifulSoup(rendered, "html.parser")
    for tag in soup.find_all(True):
        tag.attrs = {}
    return str(soup)
