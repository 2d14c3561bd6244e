from __future__ import annotations

from .api.schemas.summarize import SummarizeErrorResponse, SummarizeSuccessResponse
from .constants import UNTITLED
from .exceptions import ErrorCategory, SummaryServiceError
from .markdown_renderer import render_summary_html
from .parser import ExtractedArticle


UNKNOWN_ERROR_MESSAGE = SummaryServiceError.default_message


def build_success(
    url: str, article: ExtractedArticle, summary: str
) -> tuple[int, SummarizeSuccessResponse]:
    return 200, SummarizeSuccessResponse(
        title=article.title or UNTITLED,
        summary=summary,
        summary_html=render_summary_html(summary),
        url=url,
    )


def build_failure(exc: Exception) -> tuple[int, SummarizeErrorResponse]:
    """例外を (HTTP status, エラーレスポンス) に変換する。

    SummaryServiceError 以外の例外は内部情報を出さずに unknown (500) にまとめる。
    """
    if isinstance(exc, SummaryServiceError):
        return exc.status_code, SummarizeErrorResponse(
            error=exc.message,
            error_category=exc.category,
        )

    return 500, SummarizeErrorResponse(
        error=UNKNOWN_ERROR_MESSAGE,
        error_category=ErrorCategory.UNKNOWN,
    )
