"""Prompt templates for the farming-assistant operations."""

from kisan_advisor.localization import pick

PLAIN_TEXT = "Use plain text only, no markdown formatting."
PLAIN_TEXT_STRICT = "Use plain text only, no markdown formatting, no bold text, no special characters."

# ==================== LANGUAGE INSTRUCTIONS ====================

LANGUAGE_INSTRUCTIONS = {
    "en": "Please respond in English in plain text without any markdown formatting, bold text, or special characters.",
    "hi": "कृपया हिंदी में सादे टेक्स्ट में उत्तर दें, बिना किसी मार्कडाउन फॉर्मेटिंग या विशेष चिह्नों के।",
    "mr": "कृपया मराठीत साध्या मजकुरात उत्तर द्या, कोणत्याही मार्कडाउन फॉरमॅटिंग किंवा विशेष चिन्हांशिवाय.",
    "gu": "કૃપા કરીને ગુજરાતીમાં સાદા ટેક્સ્ટમાં જવાબ આપો, કોઈ માર્કડાઉન ફોર્મેટિંગ અથવા વિશેષ ચિહ્નો વિના.",
    "pa": "ਕਿਰਪਾ ਕਰਕੇ ਪੰਜਾਬੀ ਵਿੱਚ ਸਾਦੇ ਟੈਕਸਟ ਵਿੱਚ ਜਵਾਬ ਦਿਓ, ਬਿਨਾਂ ਕਿਸੇ ਮਾਰਕਡਾਉਨ ਫਾਰਮੈਟਿੰਗ ਜਾਂ ਵਿਸ਼ੇਸ਼ ਚਿੰਨ੍ਹਾਂ ਦੇ।",
}


def with_language(prompt: str, locale: str) -> str:
    """Append the response-language instruction for ``locale`` (English when unknown)."""
    return f"{prompt.strip()} {pick(LANGUAGE_INSTRUCTIONS, locale)}"


# ==================== STRUCTURED (JSON) PROMPTS ====================

ALERTS_PROMPT = """
Generate 3 realistic agricultural alerts for Indian farmers based on current season and common farming issues.
Return as JSON array with format: [{{"id": number, "type": "warning|info|success", "message": "alert text", "time": "relative time", "severity": "high|medium|low"}}].
Make alerts relevant to current farming conditions in India. """ + PLAIN_TEXT

MARKET_PROMPT = """
Generate current market prices for 4 major crops in India (rice, wheat, tomato, onion, potato).
Return as JSON array with format: [{{"crop": "crop name", "price": "₹XX/kg or ₹XX/quintal", "change": "+/-X%", "trend": "up|down"}}].
Use realistic current market prices for Indian agricultural markets. """ + PLAIN_TEXT

SCHEMES_PROMPT = """
Generate information about 3 current government schemes for Indian farmers.
Return as JSON array with format: [{{"name": "scheme name", "amount": "benefit amount", "status": "Active|Available|Apply Now", "description": "brief description"}}].
Include schemes like PM-Kisan, crop insurance, irrigation subsidies etc. """ + PLAIN_TEXT

WEATHER_PROMPT = """
Generate current weather forecast for farming in Punjab, India.
Return as JSON with format: {{
  "current": {{
    "temperature": "25°C",
    "condition": "Partly Cloudy",
    "humidity": "65%",
    "windSpeed": "12 km/h",
    "visibility": "10 km"
  }},
  "farmingAdvice": "Brief farming advice based on current weather"
}}.
Use realistic weather data for Punjab region. """ + PLAIN_TEXT

CROP_RECOMMENDATIONS_PROMPT = """
Generate crop recommendations for {season} season in Punjab, India.
Return as JSON array with format: [
  {{
    "name": "crop name",
    "profitability": "High/Medium/Low",
    "growthTime": "X months",
    "waterRequirement": "High/Medium/Low",
    "tips": "brief growing tip"
  }}
].
Include 4-5 suitable crops for the season. """ + PLAIN_TEXT

FARMING_TIPS_PROMPT = """
Generate farming tips for {category} category.
Return as JSON array with format: [
  {{
    "title": "tip title",
    "description": "detailed description",
    "difficulty": "Easy/Medium/Hard",
    "benefits": "expected benefits"
  }}
].
Include 4-5 practical tips. """ + PLAIN_TEXT

FARM_ANALYTICS_PROMPT = """
Generate farm analytics data for {period} period.
Return as JSON with format: {{
  "revenue": "₹45,000",
  "expenses": "₹28,000",
  "profit": "₹17,000",
  "profitMargin": "38%",
  "revenueChange": "+12%",
  "expensesChange": "+5%",
  "profitChange": "+18%",
  "marginChange": "+3%",
  "recommendations": "brief recommendations for improvement"
}}.
Use realistic Indian farming financial data. """ + PLAIN_TEXT

# ==================== FREE-TEXT PROMPTS ====================

CROP_SEARCH_PROMPT = """
You are an agricultural market expert. Provide detailed market analysis for "{crop}" crop in India:

1. Current market price and recent price trends
2. Best markets/mandis where this crop gets good prices
3. Seasonal price patterns for this crop
4. Quality factors that affect pricing
5. Storage and transportation tips
6. Best time to sell for maximum profit
7. Market demand forecast for next month
8. Comparison with similar crops

Please provide practical, actionable information that will help farmers make informed decisions about selling their {crop} crop. """ + PLAIN_TEXT_STRICT

CROP_DIAGNOSIS_PROMPT = f"""
You are an agricultural expert. Analyze this crop image and provide:
1. Is there any disease or pest problem visible?
2. If yes, what is the name of the disease/pest?
3. What is the treatment? (Suggest affordable local remedies)
4. What are the prevention measures for the future?

Please respond in simple language that a farmer can easily understand. {PLAIN_TEXT_STRICT}
"""

MARKET_ANALYSIS_PROMPT = f"""
You are an agricultural market expert. Provide current Indian agricultural market analysis:
1. Price trends for major crops (rice, wheat, tomato, onion, potato)
2. Which crops would be profitable to sell this week?
3. What price changes are expected in the coming month?
4. Suggestions for farmers

Please provide practical and useful information based on current market conditions. {PLAIN_TEXT_STRICT}
"""

SCHEME_INFORMATION_PROMPT = f"""
You are a government scheme advisor. Provide information about major government schemes for Indian farmers:
1. Detailed information about PM-Kisan scheme
2. How to get drip irrigation subsidy?
3. Application process for Kisan Credit Card
4. Benefits of crop insurance scheme
5. Required documents for applications

Please provide step-by-step information in simple language. {PLAIN_TEXT_STRICT}
"""

VOICE_QUERY_PROMPT = """
You are an AI agricultural assistant. Farmer's question: "{query}"

Please answer this question and if necessary:
1. Provide practical suggestions
2. Suggest local solutions
3. Explain in simple language
4. If technical information is needed, explain with examples

Your main goal is to help the farmer with accurate, practical information. """ + PLAIN_TEXT_STRICT

QUICK_ACTION_PROMPTS = {
    "weather": "Provide today's weather information and crop suggestions based on current weather conditions in India",
    "price": "Provide current prices for rice and other major crops in Indian markets",
    "scheme": "Provide information about new government schemes for farmers",
    "pest": "Provide information about common pest problems and their solutions for Indian crops",
}
DEFAULT_QUICK_ACTION = "Answer the farmer's question"

QUICK_ACTION_PROMPT = (
    "You are an AI agricultural assistant. {instruction}. "
    "Please provide practical and useful information. " + PLAIN_TEXT_STRICT
)
