import pytest

from kisan_advisor.localization import DEFAULT_LOCALE, LANGUAGES, SUPPORTED_LOCALES, TEXTS, localize, pick
from kisan_advisor.prompts import LANGUAGE_INSTRUCTIONS, with_language


def test_supported_locales_follow_language_list():
    assert SUPPORTED_LOCALES == ("en", "hi", "mr", "gu", "pa")
    assert all(language["name"] and language["flag"] for language in LANGUAGES)


def test_localize_returns_requested_locale():
    assert localize("sign_up_failed", "hi") == "साइन अप के दौरान एक त्रुटि हुई"


def test_localize_falls_back_to_english():
    assert localize("sign_in_failed", "gu") == TEXTS["sign_in_failed"][DEFAULT_LOCALE]


def test_localize_unknown_locale_uses_english():
    assert localize("sign_in_failed", "fr") == "An error occurred during sign in"


def test_localize_unknown_key_is_empty():
    assert localize("does_not_exist", "hi") == ""


@pytest.mark.parametrize("key", sorted(TEXTS))
def test_every_key_has_english(key):
    assert TEXTS[key]["en"]


def test_pick_uses_same_fallback_chain():
    values = {"en": "Hello", "hi": "नमस्ते"}

    assert pick(values, "hi") == "नमस्ते"
    assert pick(values, "pa") == "Hello"
    assert pick({}, "pa") == ""


def test_language_instruction_for_every_supported_locale():
    assert set(LANGUAGE_INSTRUCTIONS) == set(SUPPORTED_LOCALES)


def test_with_language_appends_instruction():
    prompt = with_language("  Tell me about rice.\n", "mr")

    assert prompt == "Tell me about rice. " + LANGUAGE_INSTRUCTIONS["mr"]


def test_with_language_defaults_to_english():
    assert with_language("Q", "xx").endswith(LANGUAGE_INSTRUCTIONS["en"])
