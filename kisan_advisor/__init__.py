# Exports the main entry points for easier imports.
from .advisor import FarmAdvisor
from .cache import ResponseCache, build_cache_key
from .formatter import ParseFailure, ResponseShape, extract_json, normalize_text
from .llm_utils import GenerationError, ResilientInvoker, RetryPolicy
from .localization import localize
from .schemas import GenerationResult, Outcome

__all__ = [
    "FarmAdvisor",
    "ResponseCache",
    "build_cache_key",
    "ParseFailure",
    "ResponseShape",
    "extract_json",
    "normalize_text",
    "GenerationError",
    "ResilientInvoker",
    "RetryPolicy",
    "localize",
    "GenerationResult",
    "Outcome",
]
