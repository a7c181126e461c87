"""
Gemini invocation with Google Maps grounding.

The caller's coordinates are passed as the retrieval location so the maps
tool searches around the user. Rate-limited calls are retried with
exponential backoff; everything else fails fast.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from google import genai
from google.genai import types
from google.genai.types import (
    GenerateContentConfig,
    GoogleMaps,
    HttpOptions,
    Tool,
)

from craving_scout.discovery.classifier import is_rate_limit_error
from craving_scout.discovery.config import DiscoveryConfig, get_config
from craving_scout.discovery.errors import InvalidCredentials, QuotaExceeded
from craving_scout.discovery.models import Coordinates, ModelTier, TokenUsage
from craving_scout.discovery.retry import retry_with_backoff

logger = structlog.get_logger()


class ModelInvoker:
    """
    Issues grounded generation requests against Gemini.

    The API key is injected explicitly and checked here, so a missing key
    is reported before any network call is attempted.
    """

    def __init__(
        self,
        api_key: str,
        config: DiscoveryConfig | None = None,
        client: Any = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not api_key or not api_key.strip():
            logger.error("GEMINI_API_KEY not configured")
            raise InvalidCredentials("API key not configured on server.")

        self.config = config or get_config()
        self.client = client or genai.Client(
            api_key=api_key,
            http_options=HttpOptions(api_version=self.config.api_version),
        )
        self._sleep = sleep

    def build_generation_config(
        self,
        coordinates: Coordinates,
        language_code: str | None = None,
    ) -> GenerateContentConfig:
        """Maps tool plus a retrieval config centred on the caller."""
        return GenerateContentConfig(
            tools=[
                Tool(google_maps=GoogleMaps())
            ],
            tool_config=types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(
                        latitude=coordinates.latitude,
                        longitude=coordinates.longitude,
                    ),
                    language_code=language_code,
                ),
            ),
        )

    async def generate(
        self,
        prompt: str,
        coordinates: Coordinates,
        tier: ModelTier = ModelTier.STANDARD,
        language_code: str | None = None,
    ) -> Any:
        """
        Run one grounded generation, retrying on rate limits.

        Returns the raw google-genai response: generated text plus
        grounding metadata.

        Raises:
            QuotaExceeded: if every attempt was rate limited
        """
        model_name = self.config.model_for_tier(tier)
        generation_config = self.build_generation_config(coordinates, language_code)
        attempts = 0

        async def _attempt():
            nonlocal attempts
            attempts += 1
            logger.info("Calling Gemini", model=model_name, attempt=attempts)

            def _call_gemini():
                return self.client.models.generate_content(
                    model=model_name,
                    contents=prompt,
                    config=generation_config,
                )

            # Run in a thread so the event loop is not blocked
            return await asyncio.to_thread(_call_gemini)

        try:
            response = await retry_with_backoff(
                _attempt,
                is_retryable=is_rate_limit_error,
                max_attempts=self.config.max_attempts,
                base_delay=self.config.retry_base_delay_seconds,
                sleep=self._sleep,
            )
        except Exception as e:
            if is_rate_limit_error(e):
                logger.error("Gemini quota exhausted", model=model_name, attempts=attempts)
                raise QuotaExceeded() from e
            raise

        logger.info("Received response from Gemini", model=model_name, attempts=attempts)
        return response


def extract_token_usage(response: Any, model_name: str) -> TokenUsage:
    """Read prompt/candidate token counts from the response usage metadata."""
    usage = getattr(response, "usage_metadata", None)
    return TokenUsage(
        input_tokens=getattr(usage, "prompt_token_count", None) or 0,
        output_tokens=getattr(usage, "candidates_token_count", None) or 0,
        model_used=model_name,
    )
