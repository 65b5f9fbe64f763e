"""Declarative catalogue of the advisor's operations.

Every operation states, as data, how it is prompted, what shape the answer
must have, which TTL class governs its cache entries and which static payload
stands in when live data is unavailable.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, TypeAdapter, ValidationError

from kisan_advisor import fallbacks, prompts
from kisan_advisor.formatter import ParseFailure, ResponseShape, extract_json, normalize_text
from kisan_advisor.schemas import (
    Alert,
    CropRecommendation,
    FarmAnalytics,
    FarmingTip,
    MarketPrice,
    Scheme,
    WeatherReport,
)


@dataclass(frozen=True)
class OperationSpec:
    name: str
    prompt: str
    shape: ResponseShape
    # ``None`` means results are never cached.
    ttl_class: Optional[str]
    parse_fallback: Mapping[str, Any]
    error_fallback: Mapping[str, Any]
    params: Tuple[str, ...] = ()
    record_schema: Optional[Type[BaseModel]] = None
    text_fields: Tuple[str, ...] = ()
    vision: bool = False
    prompt_params: Optional[Callable[[Mapping[str, str]], Dict[str, str]]] = field(
        default=None, compare=False
    )

    @property
    def cached(self) -> bool:
        return self.ttl_class is not None

    def bind(self, params: Mapping[str, Any]) -> Dict[str, str]:
        """Check ``params`` against the declared names and stringify them."""
        unexpected = set(params) - set(self.params)
        if unexpected:
            raise ValueError(f"{self.name} got unexpected parameters: {sorted(unexpected)}")
        missing = [name for name in self.params if params.get(name) in (None, "")]
        if missing:
            raise ValueError(f"{self.name} requires parameters: {missing}")
        return {name: str(params[name]).strip() for name in self.params}

    def render_prompt(self, params: Mapping[str, str], locale: str) -> str:
        values = self.prompt_params(params) if self.prompt_params else dict(params)
        return prompts.with_language(self.prompt.format(**values), locale)

    def parse(self, raw: str) -> Any:
        """Turn raw model text into this operation's value or raise ``ParseFailure``."""
        if self.shape == ResponseShape.FREE_TEXT:
            text = normalize_text(raw)
            if not text:
                raise ParseFailure("Response was empty after normalization")
            return text

        data = extract_json(raw, self.shape)
        if self.record_schema is not None:
            data = self._validate(data)
        if self.text_fields:
            records = data if isinstance(data, list) else [data]
            for record in records:
                for text_field in self.text_fields:
                    if isinstance(record.get(text_field), str):
                        record[text_field] = normalize_text(record[text_field])
        return data

    def _validate(self, data: Any) -> Any:
        if self.shape == ResponseShape.JSON_ARRAY:
            adapter = TypeAdapter(List[self.record_schema])
        else:
            adapter = TypeAdapter(self.record_schema)
        try:
            validated = adapter.validate_python(data)
        except ValidationError as exc:
            raise ParseFailure(
                f"{self.name} response failed {self.record_schema.__name__} validation: "
                f"{exc.error_count()} error(s)"
            ) from exc
        if isinstance(validated, list):
            if not validated:
                raise ParseFailure(f"{self.name} response contained no records")
            return [record.model_dump() for record in validated]
        return validated.model_dump()


def _quick_action_params(params: Mapping[str, str]) -> Dict[str, str]:
    action = params["action"].lower()
    return {"instruction": prompts.QUICK_ACTION_PROMPTS.get(action, prompts.DEFAULT_QUICK_ACTION)}


_SPECS = [
    OperationSpec(
        name="alerts",
        prompt=prompts.ALERTS_PROMPT,
        shape=ResponseShape.JSON_ARRAY,
        ttl_class="alerts",
        record_schema=Alert,
        text_fields=("message",),
        parse_fallback=fallbacks.ALERTS_PARSE,
        error_fallback=fallbacks.ALERTS_ERROR,
    ),
    OperationSpec(
        name="market",
        prompt=prompts.MARKET_PROMPT,
        shape=ResponseShape.JSON_ARRAY,
        ttl_class="market",
        record_schema=MarketPrice,
        text_fields=("crop",),
        parse_fallback=fallbacks.MARKET_PARSE,
        error_fallback=fallbacks.MARKET_ERROR,
    ),
    OperationSpec(
        name="schemes",
        prompt=prompts.SCHEMES_PROMPT,
        shape=ResponseShape.JSON_ARRAY,
        ttl_class="schemes",
        record_schema=Scheme,
        text_fields=("name", "description"),
        parse_fallback=fallbacks.SCHEMES_PARSE,
        error_fallback=fallbacks.SCHEMES_ERROR,
    ),
    OperationSpec(
        name="crop_search",
        prompt=prompts.CROP_SEARCH_PROMPT,
        shape=ResponseShape.FREE_TEXT,
        ttl_class="crop_search",
        params=("crop",),
        parse_fallback=fallbacks.CROP_SEARCH_UNAVAILABLE,
        error_fallback=fallbacks.CROP_SEARCH_UNAVAILABLE,
    ),
    OperationSpec(
        name="crop_diagnosis",
        prompt=prompts.CROP_DIAGNOSIS_PROMPT,
        shape=ResponseShape.FREE_TEXT,
        ttl_class=None,
        vision=True,
        parse_fallback=fallbacks.CROP_DIAGNOSIS_UNAVAILABLE,
        error_fallback=fallbacks.CROP_DIAGNOSIS_UNAVAILABLE,
    ),
    OperationSpec(
        name="market_analysis",
        prompt=prompts.MARKET_ANALYSIS_PROMPT,
        shape=ResponseShape.FREE_TEXT,
        ttl_class="analysis",
        parse_fallback=fallbacks.MARKET_ANALYSIS_UNAVAILABLE,
        error_fallback=fallbacks.MARKET_ANALYSIS_UNAVAILABLE,
    ),
    OperationSpec(
        name="scheme_information",
        prompt=prompts.SCHEME_INFORMATION_PROMPT,
        shape=ResponseShape.FREE_TEXT,
        ttl_class="analysis",
        parse_fallback=fallbacks.SCHEME_INFORMATION_UNAVAILABLE,
        error_fallback=fallbacks.SCHEME_INFORMATION_UNAVAILABLE,
    ),
    OperationSpec(
        name="voice_query",
        prompt=prompts.VOICE_QUERY_PROMPT,
        shape=ResponseShape.FREE_TEXT,
        ttl_class=None,
        params=("query",),
        parse_fallback=fallbacks.VOICE_QUERY_UNAVAILABLE,
        error_fallback=fallbacks.VOICE_QUERY_UNAVAILABLE,
    ),
    OperationSpec(
        name="weather",
        prompt=prompts.WEATHER_PROMPT,
        shape=ResponseShape.JSON_OBJECT,
        ttl_class="analysis",
        record_schema=WeatherReport,
        text_fields=("farmingAdvice",),
        parse_fallback=fallbacks.WEATHER_PARSE,
        error_fallback=fallbacks.WEATHER_ERROR,
    ),
    OperationSpec(
        name="crop_recommendations",
        prompt=prompts.CROP_RECOMMENDATIONS_PROMPT,
        shape=ResponseShape.JSON_ARRAY,
        ttl_class="analysis",
        params=("season",),
        record_schema=CropRecommendation,
        parse_fallback=fallbacks.CROP_RECOMMENDATIONS_PARSE,
        error_fallback=fallbacks.CROP_RECOMMENDATIONS_ERROR,
    ),
    OperationSpec(
        name="farming_tips",
        prompt=prompts.FARMING_TIPS_PROMPT,
        shape=ResponseShape.JSON_ARRAY,
        ttl_class="analysis",
        params=("category",),
        record_schema=FarmingTip,
        parse_fallback=fallbacks.FARMING_TIPS_PARSE,
        error_fallback=fallbacks.FARMING_TIPS_ERROR,
    ),
    OperationSpec(
        name="farm_analytics",
        prompt=prompts.FARM_ANALYTICS_PROMPT,
        shape=ResponseShape.JSON_OBJECT,
        ttl_class="analysis",
        params=("period",),
        record_schema=FarmAnalytics,
        parse_fallback=fallbacks.FARM_ANALYTICS_PARSE,
        error_fallback=fallbacks.FARM_ANALYTICS_ERROR,
    ),
    OperationSpec(
        name="quick_action",
        prompt=prompts.QUICK_ACTION_PROMPT,
        shape=ResponseShape.FREE_TEXT,
        ttl_class=None,
        params=("action",),
        prompt_params=_quick_action_params,
        parse_fallback=fallbacks.QUICK_ACTION_UNAVAILABLE,
        error_fallback=fallbacks.QUICK_ACTION_UNAVAILABLE,
    ),
]

OPERATIONS: Dict[str, OperationSpec] = {spec.name: spec for spec in _SPECS}


def get_operation(name: str) -> OperationSpec:
    try:
        return OPERATIONS[name]
    except KeyError:
        raise KeyError(f"Unknown operation: {name}. Expected one of {sorted(OPERATIONS)}") from None
