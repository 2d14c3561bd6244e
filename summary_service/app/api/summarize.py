from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..services.pipeline_service import SummarizePipeline
from .schemas.summarize import SummarizeErrorResponse, SummarizeSuccessResponse


logger = logging.getLogger(__name__)

router = APIRouter(tags=["summarize"])


def get_pipeline(request: Request) -> SummarizePipeline:
    """create_app() が app.state に載せたパイプラインを返す。"""
    return request.app.state.pipeline


async def _read_json_body(request: Request) -> Any:
    """JSON として読めないボディは None として扱い、検証側で 400 にする。"""
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.info("request body is not valid JSON (len=%d)", len(body))
        return None


@router.post(
    "/summarize",
    response_model=SummarizeSuccessResponse,
    responses={
        400: {"model": SummarizeErrorResponse},
        500: {"model": SummarizeErrorResponse},
        503: {"model": SummarizeErrorResponse},
    },
    summary="記事の要約",
    description="URL の記事を取得して本文を抽出し、3 つの要点に要約する。",
)
async def summarize(
    request: Request,
    pipeline: Annotated[SummarizePipeline, Depends(get_pipeline)],
) -> JSONResponse:
    payload = await _read_json_body(request)

    # 取得と LLM 呼び出し (リトライ待機を含む) はブロッキングなのでスレッドプールで実行する
    status_code, body = await run_in_threadpool(pipeline.run, payload)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
