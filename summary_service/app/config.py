from __future__ import annotations

import os
from dataclasses import dataclass

from common.llm.factory import ChatModelConfig, LlmProvider

from .constants import (
    DEFAULT_MODEL_NAME,
    FETCH_TIMEOUT_SECONDS,
    MAX_ATTEMPTS,
    MAX_INPUT_CHARS,
    RETRY_BASE_DELAY_SECONDS,
)


SUMMARY_SERVICE_LLM_PROVIDER = "SUMMARY_SERVICE_LLM_PROVIDER"
SUMMARY_SERVICE_LLM_MODEL_NAME = "SUMMARY_SERVICE_LLM_MODEL_NAME"
SUMMARY_SERVICE_LLM_API_KEY = "SUMMARY_SERVICE_LLM_API_KEY"
SUMMARY_SERVICE_LLM_TEMPERATURE = "SUMMARY_SERVICE_LLM_TEMPERATURE"
SUMMARY_SERVICE_LLM_BASE_URL = "SUMMARY_SERVICE_LLM_BASE_URL"
SUMMARY_SERVICE_FETCH_TIMEOUT = "SUMMARY_SERVICE_FETCH_TIMEOUT"
SUMMARY_SERVICE_MAX_ATTEMPTS = "SUMMARY_SERVICE_MAX_ATTEMPTS"
SUMMARY_SERVICE_RETRY_BASE_DELAY = "SUMMARY_SERVICE_RETRY_BASE_DELAY"
GEMINI_API_KEY = "GEMINI_API_KEY"


@dataclass(slots=True)
class FetchConfig:
    timeout: float


@dataclass(slots=True)
class SummarizeConfig:
    max_input_chars: int
    max_attempts: int
    retry_base_delay: float


@dataclass(slots=True)
class AppConfig:
    """summary-service 全体の設定ルート。"""

    llm: ChatModelConfig
    fetch: FetchConfig
    summarize: SummarizeConfig


def _float_env(name: str, default: float, *, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a float if set, got: {raw!r}") from exc
    if value < minimum:
        raise RuntimeError(f"{name} must be >= {minimum}, got: {value}")
    return value


def _int_env(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer if set, got: {raw!r}") from exc
    if value < minimum:
        raise RuntimeError(f"{name} must be >= {minimum}, got: {value}")
    return value


def load_chat_model_config() -> ChatModelConfig:
    """LLM の設定を読み込む。

    API キーが無くても起動は失敗させない。キーの有無はリクエストごとに確認する。
    """
    provider_raw = os.getenv(SUMMARY_SERVICE_LLM_PROVIDER) or "google"
    provider = LlmProvider.from_str(provider_raw)

    model = os.getenv(SUMMARY_SERVICE_LLM_MODEL_NAME) or DEFAULT_MODEL_NAME

    api_key = (
        os.getenv(SUMMARY_SERVICE_LLM_API_KEY) or os.getenv(GEMINI_API_KEY) or None
    )

    temperature = _float_env(SUMMARY_SERVICE_LLM_TEMPERATURE, 0.3)
    base_url = os.getenv(SUMMARY_SERVICE_LLM_BASE_URL) or None

    return ChatModelConfig(
        provider=provider,
        model=model,
        temperature=temperature,
        api_key=api_key,
        base_url=base_url,
    )


def load_config() -> AppConfig:
    """summary-service の設定を読み込んで AppConfig として返す。"""

    return AppConfig(
        llm=load_chat_model_config(),
        fetch=FetchConfig(
            timeout=_float_env(
                SUMMARY_SERVICE_FETCH_TIMEOUT, FETCH_TIMEOUT_SECONDS, minimum=0.1
            ),
        ),
        summarize=SummarizeConfig(
            max_input_chars=MAX_INPUT_CHARS,
            max_attempts=_int_env(SUMMARY_SERVICE_MAX_ATTEMPTS, MAX_ATTEMPTS, minimum=1),
            retry_base_delay=_float_env(
                SUMMARY_SERVICE_RETRY_BASE_DELAY, RETRY_BASE_DELAY_SECONDS
            ),
        ),
    )
