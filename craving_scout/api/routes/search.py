"""
API route for restaurant search.

The single server-side entry point to the discovery engine. Errors are
returned as ``{"error": ..., "errorType": ...}`` with a matching status code.
"""

from fastapi import APIRouter, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
import structlog

from craving_scout.discovery import (
    Coordinates,
    DiscoveryEngine,
    DiscoveryError,
    ModelTier,
    NoResultsFound,
    ResponseLanguage,
    SearchRequest,
    ValidationFailure,
)

router = APIRouter()
logger = structlog.get_logger()


class LocationBody(BaseModel):
    latitude: float
    longitude: float


class SearchBody(BaseModel):
    location: LocationBody
    query: str = ""
    filters: list[str] = Field(default_factory=list)
    isPremium: bool = False
    language: ResponseLanguage = ResponseLanguage.EN


def get_discovery_engine() -> DiscoveryEngine:
    return DiscoveryEngine()


def _error_response(error: DiscoveryError) -> JSONResponse:
    return JSONResponse(
        status_code=error.http_status,
        content={"error": error.user_message, "errorType": error.error_type},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as VALIDATION_ERROR instead of FastAPI's 422."""
    errors = exc.errors()
    logger.warning("Rejected malformed search body", path=request.url.path, errors=len(errors))

    if any("location" in error.get("loc", ()) for error in errors):
        return _error_response(ValidationFailure("Invalid location coordinates."))
    return _error_response(ValidationFailure())


@router.post("")
async def search_restaurants(body: SearchBody):
    """Find verified restaurants for a craving near the user."""
    logger.info(
        "Search request received",
        query=body.query,
        premium=body.isPremium,
        language=body.language.value,
    )

    request = SearchRequest(
        coordinates=Coordinates(
            latitude=body.location.latitude,
            longitude=body.location.longitude,
        ),
        query=body.query,
        filters=frozenset(body.filters),
        tier=ModelTier.ELEVATED if body.isPremium else ModelTier.STANDARD,
        language=body.language,
    )

    try:
        engine = get_discovery_engine()
        result = await engine.discover(request)
    except NoResultsFound as e:
        return {
            "restaurants": [],
            "count": 0,
            "message": e.user_message,
        }
    except DiscoveryError as e:
        return _error_response(e)

    logger.info("Search succeeded", found=len(result.restaurants))

    return {
        "restaurants": [r.model_dump(mode="json", by_alias=True) for r in result.restaurants],
        "count": len(result.restaurants),
        "tokenUsage": result.token_usage.model_dump(mode="json", by_alias=True),
    }
