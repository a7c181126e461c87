"""
Testing module for Craving Scout.

Contains sample inputs and fakes for exercising the discovery pipeline offline.
"""

from testing.sample_inputs import (
    SAMPLE_COORDINATES,
    get_sample_request,
    get_test_config,
)

__all__ = [
    "SAMPLE_COORDINATES",
    "get_sample_request",
    "get_test_config",
]
