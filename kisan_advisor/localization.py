"""Localized string tables and lookup."""

from typing import Dict, List

DEFAULT_LOCALE = "en"

LANGUAGES: List[Dict[str, str]] = [
    {"code": "en", "name": "English", "flag": "🇬🇧"},
    {"code": "hi", "name": "हिंदी", "flag": "🇮🇳"},
    {"code": "mr", "name": "मराठी", "flag": "🇮🇳"},
    {"code": "gu", "name": "ગુજરાતી", "flag": "🇮🇳"},
    {"code": "pa", "name": "ਪੰਜਾਬੀ", "flag": "🇮🇳"},
]

SUPPORTED_LOCALES = tuple(language["code"] for language in LANGUAGES)

TEXTS: Dict[str, Dict[str, str]] = {
    "email_not_confirmed": {
        "en": "Please check your email and click the confirmation link to verify your account before signing in.",
        "hi": "साइन इन करने से पहले कृपया अपना ईमेल चेक करें और अपने खाते को सत्यापित करने के लिए पुष्टिकरण लिंक पर क्लिक करें।",
        "mr": "साइन इन करण्यापूर्वी कृपया तुमचा ईमेल तपासा आणि तुमचे खाते सत्यापित करण्यासाठी पुष्टीकरण दुव्यावर क्लिक करा.",
        "gu": "સાઈન ઈન કરતા પહેલા કૃપા કરીને તમારો ઈમેઈલ તપાસો અને તમારા એકાઉન્ટને ચકાસવા માટે પુષ્ટિકરણ લિંક પર ક્લિક કરો.",
        "pa": "ਸਾਈਨ ਇਨ ਕਰਨ ਤੋਂ ਪਹਿਲਾਂ ਕਿਰਪਾ ਕਰਕੇ ਆਪਣਾ ਈਮੇਲ ਚੈੱਕ ਕਰੋ ਅਤੇ ਆਪਣੇ ਖਾਤੇ ਨੂੰ ਸਤਿਆਪਿਤ ਕਰਨ ਲਈ ਪੁਸ਼ਟੀਕਰਨ ਲਿੰਕ 'ਤੇ ਕਲਿੱਕ ਕਰੋ।",
    },
    "email_confirmation_sent": {
        "en": "We've sent a confirmation link to your email address. Please check your email and click the link to verify your account before signing in.",
        "hi": "हमने आपके ईमेल पते पर एक पुष्टिकरण लिंक भेजा है। कृपया साइन इन करने से पहले अपना ईमेल चेक करें और अपने खाते को सत्यापित करने के लिए लिंक पर क्लिक करें।",
        "mr": "आम्ही तुमच्या ईमेल पत्त्यावर एक पुष्टीकरण दुवा पाठवला आहे. कृपया साइन इन करण्यापूर्वी तुमचा ईमेल तपासा आणि तुमचे खाते सत्यापित करण्यासाठी दुव्यावर क्लिक करा.",
        "gu": "અમે તમારા ઈમેઈલ સરનામા પર એક પુષ્ટિકરણ લિંક મોકલ્યો છે. કૃપા કરીને સાઈન ઈન કરતા પહેલા તમારો ઈમેઈલ તપાસો અને તમારા એકાઉન્ટને ચકાસવા માટે લિંક પર ક્લિક કરો.",
        "pa": "ਅਸੀਂ ਤੁਹਾਡੇ ਈਮੇਲ ਪਤੇ 'ਤੇ ਇੱਕ ਪੁਸ਼ਟੀਕਰਨ ਲਿੰਕ ਭੇਜਿਆ ਹੈ। ਕਿਰਪਾ ਕਰਕੇ ਸਾਈਨ ਇਨ ਕਰਨ ਤੋਂ ਪਹਿਲਾਂ ਆਪਣਾ ਈਮੇਲ ਚੈੱਕ ਕਰੋ ਅਤੇ ਆਪਣੇ ਖਾਤੇ ਨੂੰ ਸਤਿਆਪਿਤ ਕਰਨ ਲਈ ਲਿੰਕ 'ਤੇ ਕਲਿੱਕ ਕਰੋ।",
    },
    "sign_in_failed": {
        "en": "An error occurred during sign in",
        "hi": "साइन इन के दौरान एक त्रुटि हुई",
    },
    "sign_up_failed": {
        "en": "An error occurred during sign up",
        "hi": "साइन अप के दौरान एक त्रुटि हुई",
    },
}


def localize(key: str, locale: str) -> str:
    """Look up ``key`` for ``locale``, falling back to English, then to ``""``."""
    entry = TEXTS.get(key)
    if not entry:
        return ""
    return entry.get(locale) or entry.get(DEFAULT_LOCALE) or ""


def pick(values: Dict[str, str], locale: str) -> str:
    """Same fallback chain as ``localize`` over an inline ``{locale: text}`` mapping."""
    return values.get(locale) or values.get(DEFAULT_LOCALE) or ""
