"""
Prompt composition for restaurant discovery.

The prompt asks Gemini (with Google Maps grounding) for a ranked JSON array
of restaurants, one object per venue.
"""

from craving_scout.discovery.models import ResponseLanguage, SearchRequest


RTL_LANGUAGE_DIRECTIVE = """CRITICAL LANGUAGE REQUIREMENT - {language_upper}
The user interface is in {language}. You MUST:
- Write ALL "pros" themes in {language} (translate themes to natural {language})
- Write ALL "cons" themes in {language} (translate themes to natural {language})
- Use natural, colloquial {language} that sounds authentic
- Keep restaurant names in their original language (do NOT translate names)
This is MANDATORY - do NOT return any text in another language in the pros/cons arrays.
"""


DISCOVERY_PROMPT = """{language_directive}You are an expert restaurant recommender. Your task is to find and rank restaurants based on the user's request and location, analyze their Google reviews, and provide a structured summary. Your ranking must be sophisticated, considering not just the rating but also the number of reviews to determine reliability.

User Request: "Find me the best {query}."
Filters: {filters}.

Based on this, perform the following actions:
1. Find relevant restaurants on Google Maps that match the request.
2. **Crucially, rank the results based on a weighted score that considers both the Google rating and the number of reviews.** A restaurant with a slightly lower rating but a vastly larger number of reviews is a more reliable and generally better recommendation. For example, a restaurant with a 4.7 rating from 2000 reviews is superior to one with a 4.9 rating from 100 reviews.
3. For each restaurant, deeply analyze its reviews to gauge public sentiment.
4. Generate an "aiRating" on a scale of 1.0 to 5.0 (one decimal place). This rating **must reflect your weighted analysis** from step 2, combining rating value and review volume. It should NOT be just a reflection of the Google rating.
5. Identify the three most common POSITIVE THEMES from the reviews. Summarize what reviewers frequently praise in 1-2 sentences each.
6. Identify the three most common CONCERNS or NEGATIVE THEMES from the reviews. Summarize what reviewers frequently mention as downsides in 1-2 sentences each.
7. Extract the official Google Maps star rating and the total number of reviews.
8. **IMPORTANT: Return only UNIQUE restaurants. Do not include the same restaurant twice, even if it appears multiple times in search results. Each restaurant in your response must be distinct.**

Return your findings as a VALID JSON array of objects, ordered by your calculated reliable ranking. Each object must have the following keys and data types:
- "name": string (The full name of the restaurant, exactly as it appears on Google Maps)
- "aiRating": number (e.g., 4.7 - your calculated weighted score)
- "googleRating": number (e.g., 4.5 - the raw Google rating)
- "googleReviewsCount": number (e.g., 1250)
- "pros": string[] (An array of exactly 3 common positive themes from reviews)
- "cons": string[] (An array of exactly 3 common concerns from reviews)

IMPORTANT: Do not include any text, explanations, or markdown formatting like ```json before or after the JSON array. The entire response must be only the JSON data. Each pro and con should be a concise summary of a common theme, not a made-up quote."""


def build_language_directive(language: ResponseLanguage) -> str:
    """Instruction block forcing themes into a right-to-left language."""
    if not language.is_rtl:
        return ""
    return RTL_LANGUAGE_DIRECTIVE.format(
        language=language.display_name,
        language_upper=language.display_name.upper(),
    ) + "\n"


def build_discovery_prompt(request: SearchRequest) -> str:
    """Build the grounded discovery prompt for a search request."""
    filters = ", ".join(sorted(request.filters)) if request.filters else "None"

    return DISCOVERY_PROMPT.format(
        language_directive=build_language_directive(request.language),
        query=request.query.strip(),
        filters=filters,
    )
