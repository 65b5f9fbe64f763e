"""Farming-assistant service: cache lookup, resilient model call, parsing, fallback.

:class:`FarmAdvisor` is the single entry point the presentation layer talks
to. A call builds the cache key for ``(operation, params, locale)``, serves a
live cache entry when one exists, and otherwise asks the generation backend
through :class:`ResilientInvoker`. The raw text is normalized or has its JSON
extracted according to the operation's declared shape. Successful values are
cached with the operation's TTL; failures resolve to the operation's static,
localized fallback payload so callers always receive something renderable.
"""

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from kisan_advisor.cache import ResponseCache, build_cache_key
from kisan_advisor.config import app_config
from kisan_advisor.fallbacks import resolve_fallback
from kisan_advisor.formatter import ParseFailure
from kisan_advisor.llm_utils import (
    GenerationBackend,
    GenerationError,
    MediaAttachment,
    ResilientInvoker,
    RetryPolicy,
    build_backend,
)
from kisan_advisor.operations import OperationSpec, get_operation
from kisan_advisor.schemas import GenerationResult, Outcome

logger = logging.getLogger(__name__)


class FarmAdvisor:
    def __init__(
        self,
        backend: GenerationBackend,
        cache: ResponseCache,
        policy: Optional[RetryPolicy] = None,
        invoker: Optional[ResilientInvoker] = None,
        ttls: Optional[Mapping[str, float]] = None,
        cache_fallbacks: bool = False,
    ) -> None:
        self.backend = backend
        self.cache = cache
        self.policy = policy or RetryPolicy()
        self.invoker = invoker or ResilientInvoker()
        self.ttls: Dict[str, float] = dict(ttls or app_config.model_config.cache.ttls)
        self.cache_fallbacks = cache_fallbacks

    @classmethod
    def from_config(
        cls, cache: ResponseCache, backend: Optional[GenerationBackend] = None
    ) -> "FarmAdvisor":
        """Build an advisor from the global model/retry/cache configuration."""
        model_config = app_config.model_config
        return cls(
            backend=backend or build_backend(model_config.provider),
            cache=cache,
            policy=RetryPolicy.from_settings(model_config.retry),
            ttls=model_config.cache.ttls,
            cache_fallbacks=model_config.cache.cache_fallbacks,
        )

    def _ttl(self, spec: OperationSpec) -> float:
        try:
            return self.ttls[spec.ttl_class]
        except KeyError:
            raise KeyError(f"No TTL configured for class '{spec.ttl_class}' ({spec.name})") from None

    async def fetch(
        self,
        operation: str,
        locale: str,
        media: Optional[MediaAttachment] = None,
        **params: Any,
    ) -> GenerationResult:
        """Resolve ``operation`` for ``locale``; never raises on model or parse failure."""
        spec = get_operation(operation)
        bound = spec.bind(params)
        if spec.vision and media is None:
            raise ValueError(f"{spec.name} requires a media attachment")

        cache_key = build_cache_key(spec.name, bound, locale, spec.params) if spec.cached else None
        if cache_key is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Cache hit for '%s'.", cache_key)
                return GenerationResult(
                    operation=spec.name,
                    locale=locale,
                    value=copy.deepcopy(cached),
                    outcome=Outcome.CACHED,
                    cache_key=cache_key,
                )

        prompt = spec.render_prompt(bound, locale)
        try:
            raw = await self.invoker.invoke(
                lambda: self.backend.generate(prompt, media), self.policy
            )
        except GenerationError as exc:
            logger.error("Error getting %s (%s): %s", spec.name, locale, exc)
            return self._fallback(spec, locale, bound, cache_key, Outcome.ERROR_FALLBACK, exc)

        try:
            value = spec.parse(raw)
        except ParseFailure as exc:
            logger.warning("Error parsing %s response (%s): %s", spec.name, locale, exc)
            return self._fallback(spec, locale, bound, cache_key, Outcome.PARSE_FALLBACK, exc)

        if cache_key is not None:
            self.cache.put(cache_key, copy.deepcopy(value), self._ttl(spec))
        return GenerationResult(
            operation=spec.name,
            locale=locale,
            value=value,
            outcome=Outcome.OK,
            cache_key=cache_key,
        )

    def _fallback(
        self,
        spec: OperationSpec,
        locale: str,
        params: Mapping[str, str],
        cache_key: Optional[str],
        outcome: Outcome,
        error: Exception,
    ) -> GenerationResult:
        table = spec.error_fallback if outcome == Outcome.ERROR_FALLBACK else spec.parse_fallback
        value = resolve_fallback(table, locale, params)
        # Error fallbacks are never cached.
        if self.cache_fallbacks and cache_key is not None and outcome == Outcome.PARSE_FALLBACK:
            self.cache.put(cache_key, copy.deepcopy(value), self._ttl(spec))
        return GenerationResult(
            operation=spec.name,
            locale=locale,
            value=value,
            outcome=outcome,
            cache_key=cache_key,
            error=str(error),
        )

    # --- Convenience wrappers returning the value only ---

    async def get_alerts(self, locale: str):
        return (await self.fetch("alerts", locale)).value

    async def get_market_data(self, locale: str):
        return (await self.fetch("market", locale)).value

    async def get_schemes(self, locale: str):
        return (await self.fetch("schemes", locale)).value

    async def get_crop_analysis(self, crop: str, locale: str) -> str:
        return (await self.fetch("crop_search", locale, crop=crop)).value

    async def analyze_crop_image(self, data: bytes, mime_type: str, locale: str) -> str:
        media = MediaAttachment(data=data, mime_type=mime_type)
        return (await self.fetch("crop_diagnosis", locale, media=media)).value

    async def get_market_analysis(self, locale: str) -> str:
        return (await self.fetch("market_analysis", locale)).value

    async def get_scheme_information(self, locale: str) -> str:
        return (await self.fetch("scheme_information", locale)).value

    async def handle_voice_query(self, query: str, locale: str) -> str:
        return (await self.fetch("voice_query", locale, query=query)).value

    async def get_weather_forecast(self, locale: str):
        return (await self.fetch("weather", locale)).value

    async def get_crop_recommendations(self, season: str, locale: str):
        return (await self.fetch("crop_recommendations", locale, season=season)).value

    async def get_farming_tips(self, category: str, locale: str):
        return (await self.fetch("farming_tips", locale, category=category)).value

    async def get_farm_analytics(self, period: str, locale: str):
        return (await self.fetch("farm_analytics", locale, period=period)).value

    async def handle_quick_action(self, action: str, locale: str) -> str:
        return (await self.fetch("quick_action", locale, action=action)).value
