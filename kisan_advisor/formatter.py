"""Clean-up helpers for free-form model output."""

import enum
import json
import re
from typing import Any, Iterator, Optional, Tuple


class ParseFailure(ValueError):
    """Raised when a response does not contain the expected JSON structure."""


class ResponseShape(str, enum.Enum):
    FREE_TEXT = "free_text"
    JSON_ARRAY = "json_array"
    JSON_OBJECT = "json_object"


_CODE_FENCE = re.compile(r"```[\s\S]*?```")
_HEADER = re.compile(r"^[ \t]*#{1,6}[ \t]*", re.MULTILINE)
_NUMBERED = re.compile(r"^[ \t]*(?:\d+[.)][ \t]+)+", re.MULTILINE)
_BULLET = re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE)
_BOLD = re.compile(r"\*\*(.*?)\*\*|__(.*?)__")
_ITALIC = re.compile(r"\*(.*?)\*")
_INLINE_CODE = re.compile(r"`([^`\n]*)`")
_STRAY = re.compile(r"[_~`]")
_BLANK_RUN = re.compile(r"\n[ \t]*(?:\n[ \t]*)+")


def _strip_once(text: str) -> str:
    text = _CODE_FENCE.sub("", text)
    text = _HEADER.sub("", text)
    text = _NUMBERED.sub("", text)
    text = _BULLET.sub("• ", text)
    text = _BOLD.sub(lambda m: m.group(1) if m.group(1) is not None else m.group(2), text)
    text = _ITALIC.sub(r"\1", text)
    text = _INLINE_CODE.sub(r"\1", text)
    text = _STRAY.sub("", text)
    text = _BLANK_RUN.sub("\n\n", text)
    return text.strip()


def normalize_text(text: Optional[str]) -> str:
    """Strip markdown from model output, leaving plain readable text.

    Code fences are dropped with their content; emphasis, inline code and
    header markers are unwrapped; bullet markers become "• " and list numbers
    are removed; runs of blank lines collapse to one. Passes repeat until the
    text stops changing, so ``normalize_text`` is idempotent.
    """
    if not text:
        return ""
    current = text
    while True:
        cleaned = _strip_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def format_for_display(text: Optional[str]) -> str:
    """``normalize_text`` plus a single space after sentence punctuation."""
    clean = normalize_text(text)
    clean = re.sub(r"\.[ \t]*([A-Z])", r". \1", clean)
    clean = re.sub(r"\?[ \t]*([A-Z])", r"? \1", clean)
    return re.sub(r"![ \t]*([A-Z])", r"! \1", clean)


def _balanced_spans(raw: str, opener: str, closer: str) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` for each balanced opener..closer run, skipping string literals."""
    start = raw.find(opener)
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        end = None
        for index in range(start, len(raw)):
            char = raw[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    end = index + 1
                    break
        if end is not None:
            yield start, end
        start = raw.find(opener, start + 1)


def extract_json(raw: Optional[str], shape: ResponseShape) -> Any:
    """Return the first well-formed JSON array/object embedded in ``raw``.

    Scanning works on the raw text, before any markdown stripping, so fenced
    ``json`` blocks and surrounding chatter are tolerated.
    """
    if shape == ResponseShape.JSON_ARRAY:
        opener, closer, expected = "[", "]", list
    elif shape == ResponseShape.JSON_OBJECT:
        opener, closer, expected = "{", "}", dict
    else:
        raise ValueError(f"extract_json does not handle shape {shape!r}")

    if not raw:
        raise ParseFailure("Empty response")

    last_error: Optional[Exception] = None
    for start, end in _balanced_spans(raw, opener, closer):
        try:
            parsed = json.loads(raw[start:end])
        except json.JSONDecodeError as exc:
            last_error = exc
            continue
        if isinstance(parsed, expected):
            return parsed

    if last_error is not None:
        raise ParseFailure(f"Malformed JSON in response: {last_error}") from last_error
    raise ParseFailure(f"No balanced {opener}...{closer} structure found in response")
