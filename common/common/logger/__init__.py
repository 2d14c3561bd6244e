import json
import logging
import os
import sys


DEFAULT_LOGGER_NAME = "summary-service"

# extra で渡されたときだけ JSON に載せるフィールド
EXTRA_LOG_KEYS: tuple[str, ...] = (
    "request_id",
    "span_id",
    "method",
    "path",
    "query_params",
    "status",
    "body",
    "duration",
    "url",
    "error_category",
    "attempt",
)


def setup_logger(name: str = DEFAULT_LOGGER_NAME, level: str | None = None) -> logging.Logger:
    """アプリケーション全体のロガーを設定して返す。

    Args:
        name: ロガー名 (既定値: summary-service)
        level: ログレベル (None の場合は環境変数 LOG_LEVEL、未設定なら INFO)

    Returns:
        設定済みの logging.Logger
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    service_name = os.getenv("SERVICE_NAME", name)
    logger = logging.getLogger(service_name)
    logger.setLevel(log_level)

    # 再設定時にハンドラが重複しないようにする
    if logger.handlers:
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter())

    logger.addHandler(handler)

    # ライブラリのログも同じ形式で出すため、ルートロガーにも同じハンドラを付ける
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.addHandler(handler)
        root_logger.setLevel(log_level)

    return logger


class JsonFormatter(logging.Formatter):
    """構造化ログ収集向けの簡易 JSON フォーマッタ。

    - datetime, level, logger, message を基本フィールドとして出力する。
    - 例外情報があれば exc_info に文字列で追加する。
    """

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        log_record: dict[str, object] = {
            "datetime": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in EXTRA_LOG_KEYS:
            if hasattr(record, key):
                log_record[key] = getattr(record, key)

        service_name = getattr(record, "service_name", None) or os.getenv(
            "SERVICE_NAME"
        )
        if service_name:
            log_record["service_name"] = service_name

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)
