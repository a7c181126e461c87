"""
Configuration for restaurant discovery.

Uses the Gemini Developer API with Google Maps grounding.

Environment variables required:
- GEMINI_API_KEY: API key for the Gemini Developer API
"""

from pydantic_settings import BaseSettings

from craving_scout.discovery.models import ModelTier


class DiscoveryConfig(BaseSettings):
    """Configuration for the discovery engine."""

    # Gemini credentials (checked before any call is made)
    gemini_api_key: str = ""

    # Gemini model settings (for grounding)
    standard_model_name: str = "gemini-2.5-flash"
    elevated_model_name: str = "gemini-2.5-pro"
    api_version: str = "v1beta"

    # Request limits
    max_query_length: int = 200

    # Retry settings for rate-limited calls
    max_attempts: int = 3
    retry_base_delay_seconds: float = 2.0

    class Config:
        env_prefix = ""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def model_for_tier(self, tier: ModelTier) -> str:
        """Resolve the Gemini model name for a subscription tier."""
        if tier == ModelTier.ELEVATED:
            return self.elevated_model_name
        return self.standard_model_name


def get_config() -> DiscoveryConfig:
    """Get discovery configuration from environment."""
    return DiscoveryConfig()
