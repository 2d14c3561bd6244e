from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from ...exceptions import ErrorCategory


class SummarizeSuccessResponse(BaseModel):
    """要約成功時のレスポンス DTO."""

    success: Literal[True] = True
    title: str
    summary: str
    summary_html: str
    url: str


class SummarizeErrorResponse(BaseModel):
    """要約失敗時のレスポンス DTO. error はそのまま画面に表示される。"""

    success: Literal[False] = False
    error: str
    error_category: ErrorCategory
