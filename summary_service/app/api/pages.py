from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter()


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(
    request: Request,
    url: str | None = Query(default=None, description="事前入力して自動送信する記事 URL"),
) -> HTMLResponse:
    initial_url = (url or "").strip()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "initial_url": initial_url,
            "auto_submit": bool(initial_url),
            "model_name": request.app.state.model_name,
        },
    )
