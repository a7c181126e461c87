"""
Discovery engine.

Turns a craving and a location into a ranked list of verified restaurants:

    prompt -> Gemini (with retry) -> extract -> parse -> verify -> dedupe

Every failure leaving ``discover`` has been passed through the error
classifier.
"""

import math
import time

import structlog

from craving_scout.discovery.classifier import classify_error
from craving_scout.discovery.config import DiscoveryConfig, get_config
from craving_scout.discovery.dedup import deduplicate_by_uri
from craving_scout.discovery.errors import InvalidResponse, NoResultsFound, ValidationFailure
from craving_scout.discovery.grounding import (
    GroundingIndex,
    extract_grounding_hints,
    verify_candidates,
)
from craving_scout.discovery.invoker import ModelInvoker, extract_token_usage
from craving_scout.discovery.models import DiscoveryResult, SearchRequest
from craving_scout.discovery.parsing import extract_json_span, parse_candidate_records
from craving_scout.discovery.prompts import build_discovery_prompt

logger = structlog.get_logger()


def validate_request(request: SearchRequest, max_query_length: int) -> None:
    """Reject requests that violate the inbound contract."""
    query = request.query or ""
    if not query.strip():
        raise ValidationFailure("Search query cannot be empty.")

    if len(query) > max_query_length:
        raise ValidationFailure(f"Search query too long (max {max_query_length} characters).")

    lat = request.coordinates.latitude
    lng = request.coordinates.longitude
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise ValidationFailure("Invalid location coordinates.")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        raise ValidationFailure("Invalid location coordinates.")


class DiscoveryEngine:
    """
    Finds restaurants for a search request.

    Stateless between calls: each ``discover`` builds its own grounding
    index from its own model response.
    """

    def __init__(
        self,
        invoker: ModelInvoker | None = None,
        config: DiscoveryConfig | None = None,
    ) -> None:
        self.config = config or get_config()
        self.invoker = invoker or ModelInvoker(api_key=self.config.gemini_api_key, config=self.config)

    async def discover(self, request: SearchRequest) -> DiscoveryResult:
        """
        Run the full pipeline for one request.

        Raises:
            ValidationFailure: before any network call, for a bad request
            QuotaExceeded: after the retry budget is spent
            InvalidCredentials, ConnectivityFailure: upstream failures
            InvalidResponse: unusable model output (NoResultsFound when
                nothing survived verification)
            UnclassifiedFailure: anything else
        """
        start_time = time.time()
        try:
            return await self._discover(request, start_time)
        except NoResultsFound as e:
            logger.info(
                "No verified restaurants",
                query=request.query,
                parsed=e.candidates_parsed,
                unverified=e.candidates_unverified,
            )
            raise
        except Exception as e:
            classified = classify_error(e)
            logger.error(
                "Discovery failed",
                query=request.query,
                error_type=classified.error_type,
                error=str(e),
            )
            if classified is e:
                raise
            raise classified from e

    async def _discover(self, request: SearchRequest, start_time: float) -> DiscoveryResult:
        validate_request(request, self.config.max_query_length)

        logger.info(
            "Search",
            query=request.query,
            filters=sorted(request.filters),
            tier=request.tier.value,
            language=request.language.value,
        )

        prompt = build_discovery_prompt(request)
        model_name = self.config.model_for_tier(request.tier)

        response = await self.invoker.generate(
            prompt,
            request.coordinates,
            tier=request.tier,
            language_code=request.language.value,
        )

        token_usage = extract_token_usage(response, model_name)
        logger.info(
            "Token usage",
            input_tokens=token_usage.input_tokens,
            output_tokens=token_usage.output_tokens,
            model=model_name,
        )

        response_text = getattr(response, "text", None)
        if not response_text or not response_text.strip():
            logger.warning("Gemini returned empty response", query=request.query)
            raise InvalidResponse()

        candidates = parse_candidate_records(extract_json_span(response_text))

        hints = extract_grounding_hints(response)
        index = GroundingIndex.from_hints(hints)
        logger.info("Built grounding index", hints=len(hints), entries=len(index))

        verified = verify_candidates(candidates, index)
        restaurants = deduplicate_by_uri(verified)

        unverified = len(candidates) - len(verified)
        duplicates = len(verified) - len(restaurants)

        if not restaurants:
            raise NoResultsFound(
                candidates_parsed=len(candidates),
                candidates_unverified=unverified,
            )

        logger.info(
            "Discovery complete",
            found=len(restaurants),
            parsed=len(candidates),
            unverified=unverified,
            duplicates=duplicates,
            processing_time_seconds=round(time.time() - start_time, 3),
        )

        return DiscoveryResult(
            restaurants=restaurants,
            token_usage=token_usage,
            candidates_parsed=len(candidates),
            candidates_unverified=unverified,
            duplicates_removed=duplicates,
        )
