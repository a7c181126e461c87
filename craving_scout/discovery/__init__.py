"""
Restaurant Discovery Module

Finds real restaurants that match a craving near the user.

Uses Google GenAI (Gemini) with:
- Google Maps grounding for venue discovery
- Grounding-chunk verification so every map link is authoritative
"""

from craving_scout.discovery.engine import DiscoveryEngine
from craving_scout.discovery.errors import (
    ConnectivityFailure,
    DiscoveryError,
    InvalidCredentials,
    InvalidResponse,
    NoResultsFound,
    QuotaExceeded,
    UnclassifiedFailure,
    ValidationFailure,
)
from craving_scout.discovery.models import (
    Coordinates,
    DiscoveryResult,
    ModelTier,
    ResponseLanguage,
    SearchRequest,
    TokenUsage,
    VerifiedRestaurant,
)

__all__ = [
    # Engine
    "DiscoveryEngine",
    # Models
    "Coordinates",
    "DiscoveryResult",
    "ModelTier",
    "ResponseLanguage",
    "SearchRequest",
    "TokenUsage",
    "VerifiedRestaurant",
    # Errors
    "ConnectivityFailure",
    "DiscoveryError",
    "InvalidCredentials",
    "InvalidResponse",
    "NoResultsFound",
    "QuotaExceeded",
    "UnclassifiedFailure",
    "ValidationFailure",
]
