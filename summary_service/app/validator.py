from __future__ import annotations

from typing import Any

import httpx
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from .exceptions import ClientInputError


MALFORMED_URL_MESSAGE = "URLの形式が正しくありません"

_HTTP_URL_ADAPTER: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


def _normalize_host(host: str) -> str:
    return host.strip("[]").lower()


def is_absolute_http_url(value: str) -> bool:
    """scheme (http/https) と host を持つ絶対 URL かどうか。

    実際の取得は httpx が行うので、httpx でも解釈でき、
    両者の解釈するホストが一致する場合だけ有効とする。
    """
    try:
        parsed = _HTTP_URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    if not parsed.host:
        return False

    try:
        request_url = httpx.URL(value)
    except httpx.InvalidURL:
        return False
    if request_url.scheme not in ("http", "https") or not request_url.raw_host:
        return False

    request_host = request_url.raw_host.decode("ascii", errors="replace")
    return _normalize_host(request_host) == _normalize_host(parsed.host)


def validate_request_payload(payload: Any) -> str:
    """リクエストボディから要約対象の URL を取り出して検証する。

    ネットワークには一切アクセスしない。検証に失敗した場合は ClientInputError。
    """
    if not isinstance(payload, dict):
        raise ClientInputError()

    url = payload.get("url")
    if not isinstance(url, str) or not url.strip():
        raise ClientInputError()

    url = url.strip()
    if not is_absolute_http_url(url):
        raise ClientInputError(MALFORMED_URL_MESSAGE)

    return url
