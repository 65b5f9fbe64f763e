import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest
from google.genai import errors

from kisan_advisor import llm_utils
from kisan_advisor.config import ConfigurationError, GeminiSettings, OpenAISettings, app_config
from kisan_advisor.llm_utils import (
    GeminiBackend,
    GenerationError,
    MediaAttachment,
    OpenAIBackend,
    ResilientInvoker,
    RetryPolicy,
    classify_provider_error,
)


class ScriptedCall:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def rate_limited():
    return GenerationError("429 Too Many Requests", transient=True)


@pytest.mark.parametrize("max_attempts", [1, 2, 4])
def test_invoke_retries_transient_errors_until_success(invoker, max_attempts):
    request_fn = ScriptedCall([rate_limited()] * (max_attempts - 1) + ["ok"])
    policy = RetryPolicy(max_attempts=max_attempts, base_delay=0.0, jitter_max=0.0)

    result = asyncio.run(invoker.invoke(request_fn, policy))

    assert result == "ok"
    assert request_fn.calls == max_attempts


def test_invoke_does_not_retry_fatal_errors(invoker, sleeps):
    fatal = GenerationError("400 invalid argument", transient=False)
    request_fn = ScriptedCall([fatal, "never reached"])

    with pytest.raises(GenerationError) as exc_info:
        asyncio.run(invoker.invoke(request_fn, RetryPolicy(max_attempts=5)))

    assert exc_info.value is fatal
    assert request_fn.calls == 1
    assert sleeps.delays == []


def test_invoke_propagates_unclassified_exceptions_without_retry(invoker):
    request_fn = ScriptedCall([RuntimeError("bug"), "never reached"])

    with pytest.raises(RuntimeError):
        asyncio.run(invoker.invoke(request_fn, RetryPolicy(max_attempts=3)))

    assert request_fn.calls == 1


def test_invoke_surfaces_last_error_when_exhausted(invoker):
    last = GenerationError("quota exceeded (third)", transient=True)
    request_fn = ScriptedCall([rate_limited(), rate_limited(), last])

    with pytest.raises(GenerationError) as exc_info:
        asyncio.run(invoker.invoke(request_fn, RetryPolicy(max_attempts=3)))

    assert exc_info.value is last
    assert request_fn.calls == 3


def test_backoff_doubles_per_attempt_and_adds_jitter(sleeps):
    invoker = ResilientInvoker(sleep=sleeps, rng=lambda low, high: high)
    request_fn = ScriptedCall([rate_limited(), rate_limited(), rate_limited(), "ok"])
    policy = RetryPolicy(max_attempts=4, base_delay=1.0, jitter_max=0.5)

    asyncio.run(invoker.invoke(request_fn, policy))

    assert sleeps.delays == [1.5, 2.5, 4.5]


def test_jitter_is_drawn_between_zero_and_jitter_max():
    drawn = []

    def rng(low, high):
        drawn.append((low, high))
        return 0.25

    policy = RetryPolicy(max_attempts=2, base_delay=2.0, jitter_max=1.0)

    assert policy.delay_for(1, rng) == 4.25
    assert drawn == [(0.0, 1.0)]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_attempts": 0},
        {"base_delay": -1.0},
        {"jitter_max": -0.1},
    ],
)
def test_retry_policy_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


def test_classify_openai_rate_limit_is_transient():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(429, request=request)
    exc = openai.RateLimitError("Rate limit reached", response=response, body=None)

    assert classify_provider_error(exc).transient is True


def test_classify_gemini_429_is_transient():
    exc = errors.ClientError(
        429,
        {"error": {"code": 429, "message": "Resource has been exhausted", "status": "RESOURCE_EXHAUSTED"}},
    )

    assert classify_provider_error(exc).transient is True


def test_classify_gemini_bad_request_is_fatal():
    exc = errors.ClientError(
        400,
        {"error": {"code": 400, "message": "Invalid image", "status": "INVALID_ARGUMENT"}},
    )

    assert classify_provider_error(exc).transient is False


@pytest.mark.parametrize(
    "message,transient",
    [
        ("You exceeded your current quota", True),
        ("HTTP 429", True),
        ("Connection reset by peer", False),
    ],
)
def test_classify_generic_errors_by_marker(message, transient):
    assert classify_provider_error(RuntimeError(message)).transient is transient


# --- Gemini adapter ---


class FakeGeminiModels:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(text=outcome)


def make_gemini_client(outcomes):
    models = FakeGeminiModels(outcomes)
    return SimpleNamespace(aio=SimpleNamespace(models=models)), models


@pytest.fixture(autouse=True)
def fake_types(monkeypatch):
    class FakeGenerateContentConfig:
        def __init__(self, **kwargs):
            self.kwargs = kwargs

    class FakePart:
        @staticmethod
        def from_bytes(data, mime_type):
            return {"data": data, "mime_type": mime_type}

    monkeypatch.setattr(
        llm_utils,
        "types",
        SimpleNamespace(GenerateContentConfig=FakeGenerateContentConfig, Part=FakePart),
    )


def test_gemini_backend_uses_text_model_and_settings():
    client, models = make_gemini_client(["response text"])
    settings = GeminiSettings(model_name="gemini-text", vision_model_name="gemini-vision", temperature=0.7)
    backend = GeminiBackend(settings=settings, client=client)

    result = asyncio.run(backend.generate("prompt"))

    assert result == "response text"
    call = models.calls[0]
    assert call["model"] == "gemini-text"
    assert call["contents"] == ["prompt"]
    assert call["config"].kwargs["temperature"] == 0.7
    assert call["config"].kwargs["max_output_tokens"] == 1024


def test_gemini_backend_sends_media_to_vision_model():
    client, models = make_gemini_client(["leaf blight"])
    settings = GeminiSettings(model_name="gemini-text", vision_model_name="gemini-vision")
    backend = GeminiBackend(settings=settings, client=client)

    asyncio.run(backend.generate("diagnose", MediaAttachment(data=b"\xff\xd8", mime_type="image/jpeg")))

    call = models.calls[0]
    assert call["model"] == "gemini-vision"
    assert call["contents"][1] == {"data": b"\xff\xd8", "mime_type": "image/jpeg"}
    assert call["config"].kwargs["temperature"] == settings.vision_temperature
    assert call["config"].kwargs["max_output_tokens"] == 2048


def test_gemini_backend_tags_quota_errors_as_transient():
    client, _ = make_gemini_client([RuntimeError("429 RESOURCE_EXHAUSTED: quota")])
    backend = GeminiBackend(settings=GeminiSettings(), client=client)

    with pytest.raises(GenerationError) as exc_info:
        asyncio.run(backend.generate("prompt"))

    assert exc_info.value.transient is True


def test_gemini_backend_rejects_empty_response():
    client, _ = make_gemini_client([""])
    backend = GeminiBackend(settings=GeminiSettings(), client=client)

    with pytest.raises(GenerationError) as exc_info:
        asyncio.run(backend.generate("prompt"))

    assert exc_info.value.transient is False


# --- OpenAI adapter ---


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    async def create(self, model, messages, temperature):
        self.calls.append({"model": model, "messages": messages, "temperature": temperature})
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))]
        )


def test_openai_backend_sends_prompt_and_image():
    completions = FakeCompletions("answer")
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    backend = OpenAIBackend(settings=OpenAISettings(model_name="gpt-test", temperature=0.3), client=client)

    text = asyncio.run(backend.generate("look", MediaAttachment(data=b"img", mime_type="image/png")))

    assert text == "answer"
    call = completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["temperature"] == 0.3
    content = call["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "look"}
    assert content[1]["image_url"]["url"] == "data:image/png;base64,aW1n"


def test_build_backend_rejects_unknown_provider():
    with pytest.raises(ValueError):
        llm_utils.build_backend("mystery")


def test_openai_backend_missing_key_is_not_a_generation_error(monkeypatch):
    monkeypatch.setattr(app_config, "openai_client", None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    backend = OpenAIBackend(settings=OpenAISettings())

    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        asyncio.run(backend.generate("prompt"))
