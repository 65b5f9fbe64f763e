import pytest
from omegaconf import OmegaConf

from kisan_advisor.config import HOUR, ConfigurationError, ModelConfig, app_config


def test_defaults_match_ttl_classes(monkeypatch):
    for name in ("CACHE_TTL_ALERTS", "CACHE_TTL_MARKET", "CACHE_FALLBACKS", "RETRY_MAX_ATTEMPTS"):
        monkeypatch.delenv(name, raising=False)

    config = ModelConfig()

    assert config.cache.ttls["alerts"] == 24 * HOUR
    assert config.cache.ttls["schemes"] == 24 * HOUR
    assert config.cache.ttls["market"] == 6 * HOUR
    assert config.cache.ttls["analysis"] == 6 * HOUR
    assert config.cache.ttls["crop_search"] == 6 * HOUR
    assert config.cache.cache_fallbacks is False
    assert config.retry.max_attempts == 4


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MODEL_PROVIDER", "OpenAI")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
    monkeypatch.setenv("MODEL_TEMP_TEXT", "0.2")
    monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "6")
    monkeypatch.setenv("CACHE_TTL_MARKET", "60")
    monkeypatch.setenv("CACHE_FALLBACKS", "true")

    config = ModelConfig()

    assert config.provider == "openai"
    assert config.model_name == "gpt-test"
    assert config.openai.temperature == 0.2
    assert config.retry.max_attempts == 6
    assert config.cache.ttls["market"] == 60.0
    assert config.cache.cache_fallbacks is True


def test_hydra_nodes_override_settings(monkeypatch):
    monkeypatch.delenv("MODEL_PROVIDER", raising=False)
    config = ModelConfig()
    cfg = OmegaConf.create(
        {
            "model": {"provider": "gemini", "name": "gemini-pro", "temp_text": 0.1, "top_k": 8},
            "retry": {"max_attempts": 2, "base_delay": 0.5},
            "cache": {"ttls": {"market": 120}, "cache_fallbacks": True},
        }
    )

    config.update_from_config(cfg.model)
    config.update_retry_from_config(cfg.retry)
    config.update_cache_from_config(cfg.cache)

    assert config.gemini.model_name == "gemini-pro"
    assert config.gemini.temperature == 0.1
    assert config.gemini.top_k == 8
    assert config.retry.max_attempts == 2
    assert config.retry.base_delay == 0.5
    assert config.cache.ttls["market"] == 120.0
    assert config.cache.ttls["alerts"] == 24 * HOUR
    assert config.cache.cache_fallbacks is True


def test_missing_api_key_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(app_config, "gemini_client", None)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

    with pytest.raises(ConfigurationError, match="GOOGLE_API_KEY"):
        app_config.get_client("gemini")


def test_unknown_provider_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        app_config.get_client("mystery")
