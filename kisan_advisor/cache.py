"""In-process response cache with per-entry time-to-live.

Entries are evicted lazily: an expired entry is removed the next time it is
read. There is no size bound and no background sweep. One instance is created
at start-up and handed to every component that needs it.
"""

import logging
import time
import urllib.parse
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at >= self.ttl


class ResponseCache:
    """Key/value store mapping a request fingerprint to a result with an expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            logger.debug("Cache entry '%s' expired and was evicted.", key)
            return None
        return entry.value

    def put(self, key: str, value: Any, ttl: float) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock(), ttl=ttl)

    def invalidate(self, key: str) -> bool:
        """Drop ``key``; return ``True`` when something was removed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)


def build_cache_key(
    operation: str,
    params: Optional[Mapping[str, Any]],
    locale: str,
    param_order: Optional[Sequence[str]] = None,
) -> str:
    """Compose ``operation[_param...]_locale`` deterministically.

    Values are trimmed and lower-cased so that "Tomato" and "tomato " share a
    key. Values and the locale are percent-encoded (underscores included) so
    distinct inputs never collide. Parameters are joined in ``param_order`` when given, otherwise
    sorted by name.
    """
    params = params or {}
    names = list(param_order) if param_order is not None else sorted(params)
    parts = [operation]
    for name in names:
        parts.append(_encode_segment(str(params.get(name, "")).strip().lower()))
    parts.append(_encode_segment(locale))
    return "_".join(parts)


def _encode_segment(value: str) -> str:
    return urllib.parse.quote(value, safe="").replace("_", "%5F")
