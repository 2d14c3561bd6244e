"""summary_service 全体で共有する定数。"""

from __future__ import annotations

# ── 本文抽出 ──────────────────────────────────────────────
MIN_TEXT_LENGTH: int = 100
UNTITLED: str = "タイトルなし"

# ── 要約 ──────────────────────────────────────────────────
MAX_INPUT_CHARS: int = 50_000
MAX_ATTEMPTS: int = 3
RETRY_BASE_DELAY_SECONDS: float = 2.0
DEFAULT_MODEL_NAME: str = "gemini-2.5-flash"

# provider の過負荷を示すメッセージ断片 (構造化された status が取れない場合のみ使う)
OVERLOADED_MARKERS: tuple[str, ...] = ("overloaded", "503")

# ── 取得 ──────────────────────────────────────────────────
FETCH_TIMEOUT_SECONDS: float = 15.0

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "ja,en-US;q=0.9,en;q=0.8",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}
