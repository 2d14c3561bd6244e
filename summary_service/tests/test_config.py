import pytest

from common.llm.factory import LlmProvider
from summary_service.app import config as config_module
from summary_service.app.config import load_config


_ENV_NAMES = (
    config_module.SUMMARY_SERVICE_LLM_PROVIDER,
    config_module.SUMMARY_SERVICE_LLM_MODEL_NAME,
    config_module.SUMMARY_SERVICE_LLM_API_KEY,
    config_module.SUMMARY_SERVICE_LLM_TEMPERATURE,
    config_module.SUMMARY_SERVICE_LLM_BASE_URL,
    config_module.SUMMARY_SERVICE_FETCH_TIMEOUT,
    config_module.SUMMARY_SERVICE_MAX_ATTEMPTS,
    config_module.SUMMARY_SERVICE_RETRY_BASE_DELAY,
    config_module.GEMINI_API_KEY,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults():
    cfg = load_config()

    assert cfg.llm.provider is LlmProvider.GOOGLE
    assert cfg.llm.model == "gemini-2.5-flash"
    assert cfg.llm.api_key is None
    assert cfg.llm.max_retries == 0
    assert cfg.fetch.timeout == 15.0
    assert cfg.summarize.max_input_chars == 50_000
    assert cfg.summarize.max_attempts == 3
    assert cfg.summarize.retry_base_delay == 2.0


def test_missing_api_key_does_not_fail_startup():
    cfg = load_config()
    assert not cfg.llm.has_credential()


def test_gemini_api_key_fallback(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(config_module.GEMINI_API_KEY, "gemini-key")
    assert load_config().llm.api_key == "gemini-key"

    monkeypatch.setenv(config_module.SUMMARY_SERVICE_LLM_API_KEY, "service-key")
    assert load_config().llm.api_key == "service-key"


def test_load_config_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(config_module.SUMMARY_SERVICE_LLM_PROVIDER, "OpenRouter")
    monkeypatch.setenv(config_module.SUMMARY_SERVICE_LLM_MODEL_NAME, "google/gemini-2.5-flash")
    monkeypatch.setenv(config_module.SUMMARY_SERVICE_LLM_TEMPERATURE, "0.7")
    monkeypatch.setenv(config_module.SUMMARY_SERVICE_MAX_ATTEMPTS, "5")
    monkeypatch.setenv(config_module.SUMMARY_SERVICE_RETRY_BASE_DELAY, "0.5")

    cfg = load_config()

    assert cfg.llm.provider is LlmProvider.OPENROUTER
    assert cfg.llm.model == "google/gemini-2.5-flash"
    assert cfg.llm.temperature == 0.7
    assert cfg.summarize.max_attempts == 5
    assert cfg.summarize.retry_base_delay == 0.5


@pytest.mark.parametrize(
    ("name", "value", "match"),
    [
        (config_module.SUMMARY_SERVICE_LLM_TEMPERATURE, "hot", "must be a float"),
        (config_module.SUMMARY_SERVICE_MAX_ATTEMPTS, "three", "must be an integer"),
        (config_module.SUMMARY_SERVICE_MAX_ATTEMPTS, "0", "must be >= 1"),
        (config_module.SUMMARY_SERVICE_FETCH_TIMEOUT, "0", "must be >= 0.1"),
    ],
)
def test_load_config_rejects_malformed_values(monkeypatch, name, value, match):
    monkeypatch.setenv(name, value)

    with pytest.raises(RuntimeError, match=match):
        load_config()


def test_unknown_provider(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(config_module.SUMMARY_SERVICE_LLM_PROVIDER, "anthropic-local")

    with pytest.raises(ValueError, match="unsupported LLM provider"):
        load_config()
