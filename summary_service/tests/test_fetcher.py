import httpx
import pytest

from summary_service.app.exceptions import ErrorCategory, UpstreamFetchError
from summary_service.app.fetcher import DocumentFetcher

from conftest import ARTICLE_HTML, ARTICLE_URL, CountingTransport


def test_fetch_returns_html_with_browser_headers():
    transport = CountingTransport(
        lambda request: httpx.Response(200, text=ARTICLE_HTML)
    )
    fetcher = DocumentFetcher(transport=transport)

    document = fetcher.fetch(ARTICLE_URL)

    assert document.status_code == 200
    assert document.html == ARTICLE_HTML
    assert document.final_url == ARTICLE_URL

    assert len(transport.requests) == 1
    sent = transport.requests[0]
    assert sent.method == "GET"
    assert sent.headers["User-Agent"].startswith("Mozilla/5.0")
    assert sent.headers["Accept-Language"].startswith("ja")


def test_fetch_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, text="<html>moved</html>")

    transport = CountingTransport(handler)
    document = DocumentFetcher(transport=transport).fetch("https://example.com/old")

    assert document.url == "https://example.com/old"
    assert document.final_url == "https://example.com/new"
    assert document.html == "<html>moved</html>"
    assert len(transport.requests) == 2


def test_fetch_non_success_status_is_fetch_failure():
    transport = CountingTransport(lambda request: httpx.Response(404, text="nope"))

    with pytest.raises(UpstreamFetchError) as exc_info:
        DocumentFetcher(transport=transport).fetch(ARTICLE_URL)

    err = exc_info.value
    assert err.status == 404
    assert "404" in err.message
    assert err.category is ErrorCategory.FETCH_FAILURE
    # このレイヤではリトライしない
    assert len(transport.requests) == 1


def test_fetch_network_error_carries_underlying_message():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    with pytest.raises(UpstreamFetchError) as exc_info:
        DocumentFetcher(transport=httpx.MockTransport(handler)).fetch(ARTICLE_URL)

    assert exc_info.value.status is None
    assert "URLへの接続に失敗しました" in exc_info.value.message
    assert "Name or service not known" in exc_info.value.message


def test_fetch_invalid_url_is_fetch_failure():
    transport = CountingTransport(lambda request: httpx.Response(200, text=ARTICLE_HTML))

    with pytest.raises(UpstreamFetchError) as exc_info:
        DocumentFetcher(transport=transport).fetch("http://example.com/" + "a" * 70000)

    assert exc_info.value.status_code == 400
    assert exc_info.value.category is ErrorCategory.FETCH_FAILURE
    assert transport.requests == []
