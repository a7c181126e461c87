"""
Data models for restaurant discovery.

Defines the input (SearchRequest), the model's untrusted claims
(CandidateRecord), the grounding side-channel (GroundingHint, GroundingEntry)
and the only entity ever returned to callers (VerifiedRestaurant).
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ModelTier(str, Enum):
    """Which Gemini model a search runs against."""

    STANDARD = "standard"
    ELEVATED = "elevated"


class ResponseLanguage(str, Enum):
    """Language the thematic text (pros/cons) is written in."""

    EN = "en"
    AR = "ar"

    @property
    def display_name(self) -> str:
        return _LANGUAGE_NAMES[self]

    @property
    def is_rtl(self) -> bool:
        return self in _RTL_LANGUAGES


_LANGUAGE_NAMES: dict[ResponseLanguage, str] = {
    ResponseLanguage.EN: "English",
    ResponseLanguage.AR: "Arabic",
}

_RTL_LANGUAGES = frozenset({ResponseLanguage.AR})


class Coordinates(BaseModel):
    """A point in degrees, used as the grounding location hint."""

    latitude: float
    longitude: float

    model_config = ConfigDict(frozen=True)


class SearchRequest(BaseModel):
    """
    One user search: what they are craving and where they are.

    Immutable; validated by the engine before any network call.
    """

    coordinates: Coordinates
    query: str
    filters: frozenset[str] = Field(default_factory=frozenset)
    tier: ModelTier = ModelTier.STANDARD
    language: ResponseLanguage = ResponseLanguage.EN

    model_config = ConfigDict(frozen=True)


class CandidateRecord(BaseModel):
    """
    A restaurant as claimed by the model.

    Not display-ready: it carries no map link until the Verifier joins it
    to a grounding entry.
    """

    name: str = Field(min_length=1)
    ai_rating: float = Field(alias="aiRating")
    google_rating: float = Field(alias="googleRating")
    google_reviews_count: int = Field(alias="googleReviewsCount", ge=0)
    pros: list[str] = Field(min_length=3, max_length=3)
    cons: list[str] = Field(min_length=3, max_length=3)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class GroundingHint(BaseModel):
    """A single maps grounding chunk as delivered alongside the model text."""

    title: str
    uri: str = ""


class GroundingEntry(BaseModel):
    """Authoritative venue identity: canonical title and maps URI."""

    title: str
    uri: str

    model_config = ConfigDict(frozen=True)


class VerifiedRestaurant(BaseModel):
    """A candidate whose identity was confirmed by grounding."""

    name: str
    ai_rating: float = Field(alias="aiRating")
    google_rating: float = Field(alias="googleRating")
    google_reviews_count: int = Field(alias="googleReviewsCount")
    pros: list[str]
    cons: list[str]
    maps_url: str = Field(alias="mapsUrl", min_length=1)
    title: str

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class TokenUsage(BaseModel):
    """Token counts reported by Gemini for one search."""

    input_tokens: int = Field(default=0, alias="inputTokens")
    output_tokens: int = Field(default=0, alias="outputTokens")
    model_used: str = Field(alias="modelUsed")

    model_config = ConfigDict(populate_by_name=True)


class DiscoveryResult(BaseModel):
    """Result of one discovery run."""

    restaurants: list[VerifiedRestaurant]
    token_usage: TokenUsage
    candidates_parsed: int = 0
    candidates_unverified: int = 0
    duplicates_removed: int = 0
