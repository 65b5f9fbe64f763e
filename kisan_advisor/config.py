import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from google import genai
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

HOUR = 60 * 60


class ConfigurationError(RuntimeError):
    """Raised when a provider cannot be configured (missing key, unknown provider)."""


@dataclass
class GeminiSettings:
    model_name: str = "gemini-2.0-flash"
    vision_model_name: str = "gemini-2.0-flash"
    temperature: float = 0.7
    vision_temperature: float = 0.4
    top_p: float = 0.8
    top_k: int = 40
    max_output_tokens: int = 1024
    vision_max_output_tokens: int = 2048


@dataclass
class OpenAISettings:
    model_name: str = "gpt-4o-mini"
    base_url: Optional[str] = None
    temperature: float = 0.7


@dataclass
class RetrySettings:
    max_attempts: int = 4
    base_delay: float = 1.0
    jitter_max: float = 1.0


@dataclass
class CacheSettings:
    # Seconds per TTL class. Operations pick a class, never a raw number.
    ttls: Dict[str, float] = field(
        default_factory=lambda: {
            "alerts": 24 * HOUR,
            "schemes": 24 * HOUR,
            "market": 6 * HOUR,
            "analysis": 6 * HOUR,
            "crop_search": 6 * HOUR,
        }
    )
    cache_fallbacks: bool = False


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class ModelConfig:
    """Configuration for model, retry and cache behaviour supporting multiple providers."""

    def __init__(self) -> None:
        self.provider: str = os.getenv("MODEL_PROVIDER", "gemini").lower()

        self.gemini = GeminiSettings(
            model_name=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
            vision_model_name=os.getenv(
                "GEMINI_VISION_MODEL", os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
            ),
            temperature=float(os.getenv("MODEL_TEMP_TEXT", "0.7")),
            vision_temperature=float(os.getenv("MODEL_TEMP_VISION", "0.4")),
            top_p=float(os.getenv("MODEL_TOP_P", "0.8")),
            top_k=int(os.getenv("MODEL_TOP_K", "40")),
        )
        self.openai = OpenAISettings(
            model_name=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            base_url=os.getenv("OPENAI_BASE_URL"),
            temperature=float(os.getenv("MODEL_TEMP_TEXT", "0.7")),
        )
        self.retry = RetrySettings(
            max_attempts=int(os.getenv("RETRY_MAX_ATTEMPTS", "4")),
            base_delay=float(os.getenv("RETRY_BASE_DELAY", "1.0")),
            jitter_max=float(os.getenv("RETRY_JITTER_MAX", "1.0")),
        )
        self.cache = CacheSettings(cache_fallbacks=_env_flag("CACHE_FALLBACKS", "false"))
        for ttl_class in list(self.cache.ttls):
            override = os.getenv(f"CACHE_TTL_{ttl_class.upper()}")
            if override:
                self.cache.ttls[ttl_class] = float(override)

    def _get_attr(self, cfg: Any, key: str, default: Any = None) -> Any:
        if cfg is None:
            return default
        if isinstance(cfg, dict):
            return cfg.get(key, default)
        return getattr(cfg, key, default)

    def update_from_config(self, cfg: Any) -> None:
        """Apply overrides from a Hydra ``model`` node (or plain mapping)."""
        if cfg is None:
            return

        provider = self._get_attr(cfg, "provider", self.provider)
        if provider:
            self.provider = str(provider).lower()

        name = self._get_attr(cfg, "name", None)
        if name:
            if self.provider == "gemini":
                self.gemini.model_name = name
            elif self.provider == "openai":
                self.openai.model_name = name

        vision_model = self._get_attr(cfg, "vision_model", None)
        if vision_model:
            self.gemini.vision_model_name = vision_model

        base_url = self._get_attr(cfg, "base_url", None)
        if base_url:
            self.openai.base_url = base_url

        for attr_name, key in [
            ("temperature", "temp_text"),
            ("vision_temperature", "temp_vision"),
            ("top_p", "top_p"),
        ]:
            value = self._get_attr(cfg, key, None)
            if value is not None:
                setattr(self.gemini, attr_name, float(value))
                if attr_name == "temperature":
                    self.openai.temperature = float(value)

        top_k = self._get_attr(cfg, "top_k", None)
        if top_k is not None:
            self.gemini.top_k = int(top_k)

    def update_retry_from_config(self, cfg: Any) -> None:
        if cfg is None:
            return
        max_attempts = self._get_attr(cfg, "max_attempts", None)
        if max_attempts is not None:
            self.retry.max_attempts = int(max_attempts)
        base_delay = self._get_attr(cfg, "base_delay", None)
        if base_delay is not None:
            self.retry.base_delay = float(base_delay)
        jitter_max = self._get_attr(cfg, "jitter_max", None)
        if jitter_max is not None:
            self.retry.jitter_max = float(jitter_max)

    def update_cache_from_config(self, cfg: Any) -> None:
        if cfg is None:
            return
        ttls = self._get_attr(cfg, "ttls", None)
        if ttls:
            for ttl_class, seconds in dict(ttls).items():
                self.cache.ttls[str(ttl_class)] = float(seconds)
        cache_fallbacks = self._get_attr(cfg, "cache_fallbacks", None)
        if cache_fallbacks is not None:
            self.cache.cache_fallbacks = bool(cache_fallbacks)

    @property
    def model_name(self) -> str:
        return self.openai.model_name if self.provider == "openai" else self.gemini.model_name


class AppConfig:
    """Singleton responsible for API credentials and client management across providers."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.gemini_api_key = None
            cls._instance.openai_api_key = None
            cls._instance.gemini_client = None
            cls._instance.openai_client = None
            cls._instance.model_config = ModelConfig()
        return cls._instance

    def configure(self, cfg: Any) -> None:
        """Apply a full Hydra configuration (``model``, ``retry`` and ``cache`` nodes)."""
        self.model_config.update_from_config(getattr(cfg, "model", None))
        self.model_config.update_retry_from_config(getattr(cfg, "retry", None))
        self.model_config.update_cache_from_config(getattr(cfg, "cache", None))

    def set_gemini_api_key(self, key: str) -> None:
        """Configure the Gemini client with the provided API key."""
        self.gemini_api_key = key
        try:
            self.gemini_client = genai.Client(api_key=self.gemini_api_key)
        except Exception as exc:
            self.gemini_api_key = None
            self.gemini_client = None
            raise ConfigurationError(f"Failed to configure the Google API key: {exc}") from exc
        logger.info("Google API key configured.")

    def set_openai_api_key(self, key: str, base_url: Optional[str] = None) -> None:
        """Configure the OpenAI client with the provided API key and optional base URL."""
        self.openai_api_key = key
        if base_url:
            self.model_config.openai.base_url = base_url
        try:
            if base_url:
                self.openai_client = AsyncOpenAI(api_key=self.openai_api_key, base_url=base_url)
            else:
                self.openai_client = AsyncOpenAI(api_key=self.openai_api_key)
        except Exception as exc:
            self.openai_api_key = None
            self.openai_client = None
            raise ConfigurationError(f"Failed to configure the OpenAI API key: {exc}") from exc
        logger.info("OpenAI API key configured.")

    def get_client(self, provider: Optional[str] = None):
        """Return a cached client for the provider, reading credentials from the environment."""
        provider = (provider or self.model_config.provider or "gemini").lower()
        if provider == "gemini":
            return self._get_gemini_client()
        if provider == "openai":
            return self._get_openai_client()
        raise ConfigurationError(f"Unknown provider: {provider}. Expected 'gemini' or 'openai'.")

    def _get_gemini_client(self):
        if self.gemini_client:
            return self.gemini_client

        key_from_env = os.getenv("GOOGLE_API_KEY")
        if not key_from_env:
            raise ConfigurationError("GOOGLE_API_KEY is not set.")
        self.set_gemini_api_key(key_from_env)
        return self.gemini_client

    def _get_openai_client(self):
        if self.openai_client:
            return self.openai_client

        key_from_env = os.getenv("OPENAI_API_KEY")
        if not key_from_env:
            raise ConfigurationError("OPENAI_API_KEY is not set.")
        base_url = self.model_config.openai.base_url or os.getenv("OPENAI_BASE_URL")
        self.set_openai_api_key(key_from_env, base_url)
        return self.openai_client


# Global singleton instances
app_config = AppConfig()
model_config = app_config.model_config
