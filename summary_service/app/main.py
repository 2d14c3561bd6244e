from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware

from .api.health import router as health_router
from .api.pages import router as pages_router
from .api.summarize import router as summarize_router
from .config import AppConfig, load_config
from .fetcher import DocumentFetcher
from .services.pipeline_service import SummarizePipeline
from .summarizer import ArticleSummarizer


logger = logging.getLogger(__name__)


def build_pipeline(config: AppConfig) -> SummarizePipeline:
    fetcher = DocumentFetcher(timeout=config.fetch.timeout)
    summarizer = ArticleSummarizer(
        config.llm,
        max_input_chars=config.summarize.max_input_chars,
        max_attempts=config.summarize.max_attempts,
        retry_base_delay=config.summarize.retry_base_delay,
    )
    return SummarizePipeline(fetcher=fetcher, summarizer=summarizer)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """FastAPI アプリのファクトリ。"""
    setup_logger(name="summary-service")
    config = config or load_config()

    app = FastAPI(
        title="Article Summary Service",
        description="URL の記事を 3 つの要点に要約する",
        version="0.1.0",
    )
    app.state.pipeline = build_pipeline(config)
    app.state.model_name = config.llm.model

    logger.info(
        "summary-service configured provider=%s model=%s credential_configured=%s",
        config.llm.provider.value,
        config.llm.model,
        config.llm.has_credential(),
    )

    app.add_middleware(RequestTraceMiddleware)

    app.include_router(pages_router)
    app.include_router(summarize_router, prefix="/api")
    app.include_router(health_router)

    return app


app = create_app()


def main() -> None:
    """uvicorn でサービスを起動するエントリポイント。"""
    import uvicorn

    port = int(os.getenv("SUMMARY_SERVICE_PORT", "8000"))
    uvicorn.run(
        "summary_service.app.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
