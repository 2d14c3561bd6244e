from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    INVALID_INPUT = "invalid_input"
    FETCH_FAILURE = "fetch_failure"
    EXTRACTION_FAILURE = "extraction_failure"
    MISSING_CREDENTIAL = "missing_credential"
    PROVIDER_OVERLOADED = "provider_overloaded"
    INVALID_CREDENTIAL = "invalid_credential"
    UNKNOWN = "unknown"


class SummaryServiceError(Exception):
    """Base exception for all summary-service errors.

    message はそのままユーザーに表示されるので、内部情報を含めないこと。
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN
    status_code: int = 500
    default_message: str = "要約処理中にエラーが発生しました。しばらく待ってから再度お試しください。"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ClientInputError(SummaryServiceError):
    """Missing or malformed URL in the request body."""

    category = ErrorCategory.INVALID_INPUT
    status_code = 400
    default_message = "有効なURLを入力してください"


class UpstreamFetchError(SummaryServiceError):
    """Network failure or non-success status from the target site."""

    category = ErrorCategory.FETCH_FAILURE
    status_code = 400
    default_message = "ページの取得に失敗しました"

    def __init__(self, message: str | None = None, *, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class ExtractionError(SummaryServiceError):
    """No article body could be extracted, or it is too short."""

    category = ErrorCategory.EXTRACTION_FAILURE
    status_code = 400
    default_message = "記事の本文を抽出できませんでした"


class ProviderConfigError(SummaryServiceError):
    """LLM provider credential is not configured."""

    category = ErrorCategory.MISSING_CREDENTIAL
    status_code = 500
    default_message = "AI APIキーが設定されていません"


class ProviderOverloadError(SummaryServiceError):
    """Provider stayed overloaded after all retry attempts."""

    category = ErrorCategory.PROVIDER_OVERLOADED
    status_code = 503
    default_message = "AI APIが混雑しています。少し待ってから再度お試しください。（30秒〜1分後）"


class ProviderAuthError(SummaryServiceError):
    """Provider rejected the configured credential."""

    category = ErrorCategory.INVALID_CREDENTIAL
    status_code = 500
    default_message = "AI APIキーが無効です"
