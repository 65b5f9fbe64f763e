import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from kisan_advisor.advisor import FarmAdvisor
from kisan_advisor.cache import ResponseCache
from kisan_advisor.llm_utils import ResilientInvoker, RetryPolicy

HOUR = 60 * 60

TEST_TTLS = {
    "alerts": 24 * HOUR,
    "schemes": 24 * HOUR,
    "market": 6 * HOUR,
    "analysis": 6 * HOUR,
    "crop_search": 6 * HOUR,
}


class ManualClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeBackend:
    """Plays back scripted outcomes: strings are returned, exceptions raised."""

    def __init__(self, outcomes=()):
        self.outcomes = list(outcomes)
        self.calls = []

    async def generate(self, prompt, media=None):
        self.calls.append({"prompt": prompt, "media": media})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def cache(clock):
    return ResponseCache(clock=clock)


@pytest.fixture
def sleeps():
    return RecordingSleep()


@pytest.fixture
def invoker(sleeps):
    return ResilientInvoker(sleep=sleeps, rng=lambda low, high: 0.0)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def make_advisor(backend, cache, invoker):
    def _make(max_attempts=3, cache_fallbacks=False):
        return FarmAdvisor(
            backend=backend,
            cache=cache,
            policy=RetryPolicy(max_attempts=max_attempts, base_delay=1.0, jitter_max=0.0),
            invoker=invoker,
            ttls=TEST_TTLS,
            cache_fallbacks=cache_fallbacks,
        )

    return _make
