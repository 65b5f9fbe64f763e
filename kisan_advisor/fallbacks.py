"""Static localized payloads served when live model data is unavailable.

Each table maps a locale to a payload; locales without an entry use English.
``PARSE`` payloads stand in for responses that could not be parsed, ``ERROR``
payloads for calls that failed outright. String payloads may reference the
operation's parameters (``{crop}``).
"""

import copy
from typing import Any, Dict, Mapping

from kisan_advisor.localization import DEFAULT_LOCALE

ALERTS_PARSE = {
    "en": [
        {"id": 1, "type": "warning", "message": "Weather alert: Heavy rain expected", "time": "2 hours ago", "severity": "high"},
        {"id": 2, "type": "info", "message": "Market prices updated", "time": "1 hour ago", "severity": "medium"},
    ],
    "hi": [
        {"id": 1, "type": "warning", "message": "मौसम चेतावनी: भारी बारिश की संभावना", "time": "2 घंटे पहले", "severity": "high"},
        {"id": 2, "type": "info", "message": "बाजार भाव अपडेट", "time": "1 घंटे पहले", "severity": "medium"},
    ],
}
ALERTS_ERROR = {
    "en": [{"id": 1, "type": "info", "message": "Service temporarily unavailable", "time": "Now", "severity": "low"}],
    "hi": [{"id": 1, "type": "info", "message": "सेवा अस्थायी रूप से अनुपलब्ध", "time": "अभी", "severity": "low"}],
}

MARKET_PARSE = {
    "en": [
        {"crop": "Rice", "price": "₹25/kg", "change": "+2%", "trend": "up"},
        {"crop": "Wheat", "price": "₹22/kg", "change": "-1%", "trend": "down"},
        {"crop": "Tomato", "price": "₹30/kg", "change": "+5%", "trend": "up"},
    ],
    "hi": [
        {"crop": "चावल", "price": "₹25/kg", "change": "+2%", "trend": "up"},
        {"crop": "गेहूं", "price": "₹22/kg", "change": "-1%", "trend": "down"},
        {"crop": "टमाटर", "price": "₹30/kg", "change": "+5%", "trend": "up"},
    ],
}
MARKET_ERROR = {
    "en": [{"crop": "Data unavailable", "price": "---", "change": "0%", "trend": "up"}],
    "hi": [{"crop": "डेटा अनुपलब्ध", "price": "---", "change": "0%", "trend": "up"}],
}

SCHEMES_PARSE = {
    "en": [
        {"name": "PM-Kisan Scheme", "amount": "₹6,000/year", "status": "Active", "description": "Direct income support to farmers"},
        {"name": "Crop Insurance", "amount": "Up to ₹2 lakh", "status": "Available", "description": "Protection against crop loss"},
    ],
    "hi": [
        {"name": "पीएम-किसान योजना", "amount": "₹6,000/year", "status": "Active", "description": "किसानों को प्रत्यक्ष आय सहायता"},
        {"name": "फसल बीमा", "amount": "₹2 लाख तक", "status": "Available", "description": "फसल नुकसान से सुरक्षा"},
    ],
}
SCHEMES_ERROR = {
    "en": [{"name": "Service unavailable", "amount": "---", "status": "Pending", "description": "Please try again later"}],
    "hi": [{"name": "सेवा अनुपलब्ध", "amount": "---", "status": "Pending", "description": "कृपया बाद में पुनः प्रयास करें"}],
}

WEATHER_PARSE = {
    "en": {
        "current": {"temperature": "25°C", "condition": "Partly Cloudy", "humidity": "65%", "windSpeed": "12 km/h", "visibility": "10 km"},
        "farmingAdvice": "Good weather for irrigation. Consider watering crops in the evening.",
    },
    "hi": {
        "current": {"temperature": "25°C", "condition": "आंशिक बादल", "humidity": "65%", "windSpeed": "12 km/h", "visibility": "10 km"},
        "farmingAdvice": "सिंचाई के लिए अच्छा मौसम। शाम को फसलों को पानी देने पर विचार करें।",
    },
}
WEATHER_ERROR = {
    "en": {
        "current": {"temperature": "--", "condition": "Data unavailable", "humidity": "--", "windSpeed": "--", "visibility": "--"},
        "farmingAdvice": "Weather forecast is temporarily unavailable. Please try again later.",
    },
    "hi": {
        "current": {"temperature": "--", "condition": "डेटा अनुपलब्ध", "humidity": "--", "windSpeed": "--", "visibility": "--"},
        "farmingAdvice": "मौसम पूर्वानुमान अस्थायी रूप से अनुपलब्ध है। कृपया बाद में पुनः प्रयास करें।",
    },
}

CROP_RECOMMENDATIONS_PARSE = {
    "en": [
        {"name": "Wheat", "profitability": "High", "growthTime": "4-5 months", "waterRequirement": "Medium", "tips": "Plant in November for best results"},
        {"name": "Rice", "profitability": "Medium", "growthTime": "3-4 months", "waterRequirement": "High", "tips": "Ensure proper water management"},
    ],
    "hi": [
        {"name": "गेहूं", "profitability": "उच्च", "growthTime": "4-5 महीने", "waterRequirement": "मध्यम", "tips": "सर्वोत्तम परिणामों के लिए नवंबर में बोएं"},
        {"name": "चावल", "profitability": "मध्यम", "growthTime": "3-4 महीने", "waterRequirement": "उच्च", "tips": "उचित जल प्रबंधन सुनिश्चित करें"},
    ],
}
CROP_RECOMMENDATIONS_ERROR = {
    "en": [{"name": "Recommendations unavailable", "profitability": "---", "growthTime": "---", "waterRequirement": "---", "tips": "Please try again later"}],
    "hi": [{"name": "सुझाव अनुपलब्ध", "profitability": "---", "growthTime": "---", "waterRequirement": "---", "tips": "कृपया बाद में पुनः प्रयास करें"}],
}

FARMING_TIPS_PARSE = {
    "en": [
        {"title": "Soil Testing", "description": "Test your soil pH and nutrients regularly", "difficulty": "Easy", "benefits": "Better crop yield and soil health"},
        {"title": "Crop Rotation", "description": "Rotate different crops to maintain soil fertility", "difficulty": "Medium", "benefits": "Improved soil health and pest control"},
    ],
    "hi": [
        {"title": "मिट्टी परीक्षण", "description": "नियमित रूप से अपनी मिट्टी का pH और पोषक तत्व परीक्षण करें", "difficulty": "आसान", "benefits": "बेहतर फसल उत्पादन और मिट्टी का स्वास्थ्य"},
        {"title": "फसल चक्र", "description": "मिट्टी की उर्वरता बनाए रखने के लिए विभिन्न फसलों का चक्र करें", "difficulty": "मध्यम", "benefits": "बेहतर मिट्टी स्वास्थ्य और कीट नियंत्रण"},
    ],
}
FARMING_TIPS_ERROR = {
    "en": [{"title": "Tips unavailable", "description": "Farming tips are temporarily unavailable. Please try again later.", "difficulty": "---", "benefits": "---"}],
    "hi": [{"title": "सुझाव अनुपलब्ध", "description": "खेती के सुझाव अस्थायी रूप से अनुपलब्ध हैं। कृपया बाद में पुनः प्रयास करें।", "difficulty": "---", "benefits": "---"}],
}

_ANALYTICS_FIGURES = {
    "revenue": "₹45,000",
    "expenses": "₹28,000",
    "profit": "₹17,000",
    "profitMargin": "38%",
    "revenueChange": "+12%",
    "expensesChange": "+5%",
    "profitChange": "+18%",
    "marginChange": "+3%",
}
FARM_ANALYTICS_PARSE = {
    "en": dict(
        _ANALYTICS_FIGURES,
        recommendations="Consider reducing fertilizer costs and exploring organic alternatives for better profit margins.",
    ),
    "hi": dict(
        _ANALYTICS_FIGURES,
        recommendations="बेहतर लाभ मार्जिन के लिए उर्वरक लागत कम करने और जैविक विकल्पों की खोज करने पर विचार करें।",
    ),
}
_ANALYTICS_BLANK = {key: "---" for key in _ANALYTICS_FIGURES}
FARM_ANALYTICS_ERROR = {
    "en": dict(_ANALYTICS_BLANK, recommendations="Farm analytics are temporarily unavailable. Please try again later."),
    "hi": dict(_ANALYTICS_BLANK, recommendations="फार्म विश्लेषण अस्थायी रूप से अनुपलब्ध है। कृपया बाद में पुनः प्रयास करें।"),
}

CROP_SEARCH_UNAVAILABLE = {
    "en": "Market analysis for {crop} is temporarily unavailable. Please try again later.",
    "hi": "{crop} के लिए बाजार विश्लेषण अस्थायी रूप से अनुपलब्ध है। कृपया बाद में पुनः प्रयास करें।",
}
CROP_DIAGNOSIS_UNAVAILABLE = {
    "en": "Image analysis is temporarily unavailable. Please try again later.",
    "hi": "छवि विश्लेषण अस्थायी रूप से अनुपलब्ध है। कृपया बाद में पुनः प्रयास करें।",
}
MARKET_ANALYSIS_UNAVAILABLE = {
    "en": "Market analysis is temporarily unavailable. Please try again later.",
    "hi": "बाजार विश्लेषण अस्थायी रूप से अनुपलब्ध है। कृपया बाद में पुनः प्रयास करें।",
}
SCHEME_INFORMATION_UNAVAILABLE = {
    "en": "Scheme information is temporarily unavailable. Please try again later.",
    "hi": "योजना की जानकारी अस्थायी रूप से अनुपलब्ध है। कृपया बाद में पुनः प्रयास करें।",
}
VOICE_QUERY_UNAVAILABLE = {
    "en": "Voice assistant is temporarily unavailable. Please try again later.",
    "hi": "वॉइस असिस्टेंट अस्थायी रूप से अनुपलब्ध है। कृपया बाद में पुनः प्रयास करें।",
}
QUICK_ACTION_UNAVAILABLE = {
    "en": "Quick action is temporarily unavailable. Please try again later.",
    "hi": "त्वरित कार्रवाई अस्थायी रूप से अनुपलब्ध है। कृपया बाद में पुनः प्रयास करें।",
}


def resolve_fallback(table: Mapping[str, Any], locale: str, params: Mapping[str, str]) -> Any:
    """Return a private copy of the payload for ``locale`` with parameters filled in."""
    payload = table.get(locale)
    if payload is None:
        payload = table[DEFAULT_LOCALE]
    if isinstance(payload, str):
        return payload.format(**params)
    return copy.deepcopy(payload)
