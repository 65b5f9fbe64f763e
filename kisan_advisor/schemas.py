import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Record schemas for structured model output ---


class _Record(BaseModel):
    # Models occasionally add fields or emit numbers where text is expected.
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class Alert(_Record):
    """A farming alert shown on the dashboard."""

    id: Optional[int] = Field(default=None)
    type: str = Field(default="info", description="warning | info | success")
    message: str
    time: str = Field(default="")
    severity: str = Field(default="medium", description="high | medium | low")


class MarketPrice(_Record):
    crop: str
    price: str
    change: str = Field(default="0%")
    trend: str = Field(default="up", description="up | down")


class Scheme(_Record):
    name: str
    amount: str = Field(default="")
    status: str = Field(default="")
    description: str = Field(default="")


class CurrentWeather(_Record):
    temperature: str
    condition: str
    humidity: str = Field(default="")
    windSpeed: str = Field(default="")
    visibility: str = Field(default="")


class WeatherReport(_Record):
    current: CurrentWeather
    farmingAdvice: str = Field(default="")


class CropRecommendation(_Record):
    name: str
    profitability: str = Field(default="")
    growthTime: str = Field(default="")
    waterRequirement: str = Field(default="")
    tips: str = Field(default="")


class FarmingTip(_Record):
    title: str
    description: str
    difficulty: str = Field(default="")
    benefits: str = Field(default="")


class FarmAnalytics(_Record):
    revenue: str
    expenses: str
    profit: str
    profitMargin: str = Field(default="")
    revenueChange: str = Field(default="")
    expensesChange: str = Field(default="")
    profitChange: str = Field(default="")
    marginChange: str = Field(default="")
    recommendations: str = Field(default="")


# --- Result envelope returned to callers ---


class Outcome(str, enum.Enum):
    OK = "ok"
    CACHED = "cached"
    PARSE_FALLBACK = "parse_fallback"
    ERROR_FALLBACK = "error_fallback"


class GenerationResult(BaseModel):
    """What a caller gets back for one operation: always a renderable ``value``."""

    operation: str
    locale: str
    value: Any
    outcome: Outcome
    cache_key: Optional[str] = Field(default=None)
    error: Optional[str] = Field(
        default=None,
        description="Diagnostic for fallback outcomes; never meant for display.",
    )

    @property
    def degraded(self) -> bool:
        return self.outcome in (Outcome.PARSE_FALLBACK, Outcome.ERROR_FALLBACK)
