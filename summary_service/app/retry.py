from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


def linear_backoff(base_delay: float) -> Callable[[int], float]:
    """attempt_index (1 始まり) × base_delay 秒の待機時間を返す関数を作る。"""

    def _backoff(attempt_index: int) -> float:
        return attempt_index * base_delay

    return _backoff


def call_with_retry(
    fn: Callable[[], T],
    *,
    max_attempts: int,
    should_retry: Callable[[Exception], bool],
    backoff: Callable[[int], float],
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """fn を最大 max_attempts 回呼び出す。

    should_retry(exc) が True の失敗だけを backoff(attempt_index) 秒待って再試行し、
    それ以外の失敗と最後の試行の失敗はそのまま送出する。
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got: {max_attempts}")

    for attempt in range(1, max_attempts + 1):
        try:
            return fn()
        except Exception as exc:
            if attempt >= max_attempts or not should_retry(exc):
                raise
            delay = backoff(attempt)
            logger.info(
                "retrying after attempt %d/%d failed (%s); waiting %.1f seconds",
                attempt,
                max_attempts,
                exc,
                delay,
                extra={"attempt": attempt},
            )
            sleep(delay)

    # max_attempts >= 1 なので到達しない
    raise RuntimeError("unreachable")
