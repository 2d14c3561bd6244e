from __future__ import annotations

from fastapi import APIRouter


router = APIRouter()


@router.get("/health", summary="ヘルスチェック")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": "summary-service"}
