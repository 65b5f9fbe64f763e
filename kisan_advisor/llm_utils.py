from __future__ import annotations

import asyncio
import base64
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

import openai
from google.genai import errors, types

from kisan_advisor.config import GeminiSettings, OpenAISettings, RetrySettings, app_config

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RATE_LIMIT_MARKERS = ("429", "quota", "resource_exhausted", "rate limit")


class GenerationError(Exception):
    """A failed model call, tagged by the adapter that made it.

    ``transient`` is ``True`` for rate-limit / quota conditions that may clear
    after a short wait. The retry layer reads only this flag.
    """

    def __init__(self, message: str, transient: bool = False) -> None:
        super().__init__(message)
        self.transient = transient


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 4
    base_delay: float = 1.0
    jitter_max: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0 or self.jitter_max < 0:
            raise ValueError("base_delay and jitter_max must be non-negative")

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.max_attempts,
            base_delay=settings.base_delay,
            jitter_max=settings.jitter_max,
        )

    def delay_for(self, attempt: int, rng: Callable[[float, float], float] = random.uniform) -> float:
        """Backoff before retrying after zero-based ``attempt`` failed."""
        return self.base_delay * (2 ** attempt) + rng(0.0, self.jitter_max)


class ResilientInvoker:
    """Run a zero-argument coroutine factory with exponential backoff on transient errors.

    Per invocation the call moves Attempting -> Success, or Attempting ->
    Waiting -> Attempting while transient failures leave attempts to spare,
    or Attempting -> TerminalFailure. Non-transient errors are never retried;
    on exhaustion the error of the last attempt is raised.
    """

    def __init__(
        self,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Callable[[float, float], float] = random.uniform,
    ) -> None:
        self._sleep = sleep
        self._rng = rng

    async def invoke(self, request_fn: Callable[[], Awaitable[T]], policy: RetryPolicy) -> T:
        for attempt in range(policy.max_attempts):
            try:
                return await request_fn()
            except GenerationError as exc:
                if not exc.transient:
                    logger.error("Model call failed with a non-retryable error: %s", exc)
                    raise
                if attempt >= policy.max_attempts - 1:
                    logger.error(
                        "Model call still rate limited after %d attempts: %s",
                        policy.max_attempts,
                        exc,
                    )
                    raise
                delay = policy.delay_for(attempt, self._rng)
                logger.warning(
                    "Rate limit hit, retrying in %.2fs (attempt %d/%d)",
                    delay,
                    attempt + 1,
                    policy.max_attempts,
                )
                await self._sleep(delay)
        # range(max_attempts) always returns or raises above.
        raise AssertionError("unreachable")


def _looks_rate_limited(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in _RATE_LIMIT_MARKERS)


def classify_provider_error(exc: BaseException) -> GenerationError:
    """Translate a provider SDK exception into a tagged ``GenerationError``."""
    if isinstance(exc, GenerationError):
        return exc
    if isinstance(exc, openai.RateLimitError):
        return GenerationError(str(exc), transient=True)
    if isinstance(exc, errors.APIError):
        transient = exc.code == 429 or (exc.status or "").upper() == "RESOURCE_EXHAUSTED"
        return GenerationError(str(exc), transient=transient or _looks_rate_limited(str(exc)))
    return GenerationError(str(exc) or exc.__class__.__name__, transient=_looks_rate_limited(str(exc)))


@dataclass(frozen=True)
class MediaAttachment:
    data: bytes
    mime_type: str


class GenerationBackend(ABC):
    """Prompt in, text out. Implementations raise only ``GenerationError``."""

    @abstractmethod
    async def generate(self, prompt: str, media: Optional[MediaAttachment] = None) -> str:
        ...


class GeminiBackend(GenerationBackend):
    """Google Gemini via ``google-genai``'s async client."""

    def __init__(self, settings: Optional[GeminiSettings] = None, client=None) -> None:
        self.settings = settings or app_config.model_config.gemini
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = app_config.get_client("gemini")
        return self._client

    def _build_config(self, vision: bool):
        settings = self.settings
        return types.GenerateContentConfig(
            temperature=settings.vision_temperature if vision else settings.temperature,
            top_p=settings.top_p,
            top_k=settings.top_k,
            max_output_tokens=(
                settings.vision_max_output_tokens if vision else settings.max_output_tokens
            ),
        )

    async def generate(self, prompt: str, media: Optional[MediaAttachment] = None) -> str:
        vision = media is not None
        model_name = self.settings.vision_model_name if vision else self.settings.model_name
        contents = [prompt]
        if vision:
            contents.append(types.Part.from_bytes(data=media.data, mime_type=media.mime_type))

        # ConfigurationError from a missing key propagates unclassified.
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=model_name,
                contents=contents,
                config=self._build_config(vision),
            )
        except Exception as exc:
            raise classify_provider_error(exc) from exc

        text = response.text
        if not text:
            raise GenerationError(f"Empty response from {model_name}", transient=False)
        return text


class OpenAIBackend(GenerationBackend):
    """OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        settings: Optional[OpenAISettings] = None,
        client=None,
    ) -> None:
        self.settings = settings or app_config.model_config.openai
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = app_config.get_client("openai")
        return self._client

    async def generate(self, prompt: str, media: Optional[MediaAttachment] = None) -> str:
        if media is None:
            content = prompt
        else:
            encoded = base64.b64encode(media.data).decode("ascii")
            content = [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{media.mime_type};base64,{encoded}"},
                },
            ]

        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self.settings.model_name,
                messages=[{"role": "user", "content": content}],
                temperature=self.settings.temperature,
            )
        except Exception as exc:
            raise classify_provider_error(exc) from exc

        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise GenerationError(f"Empty response from {self.settings.model_name}", transient=False)
        return text


def build_backend(provider: Optional[str] = None) -> GenerationBackend:
    """Return the backend for ``provider`` (defaults to the configured provider)."""
    model_config = app_config.model_config
    provider = (provider or model_config.provider or "gemini").lower()
    if provider == "gemini":
        return GeminiBackend(model_config.gemini)
    if provider == "openai":
        return OpenAIBackend(model_config.openai)
    raise ValueError(f"Unknown provider: {provider}. Expected 'gemini' or 'openai'.")
