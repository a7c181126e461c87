"""
Response extraction and record parsing.

Models often wrap the JSON in prose or code fences; extraction strips that
best-effort, parsing is strict.
"""

import json
import re

import structlog
from pydantic import ValidationError

from craving_scout.discovery.errors import InvalidResponse
from craving_scout.discovery.models import CandidateRecord

logger = structlog.get_logger()

# Leftmost opening bracket wins; greedy to the last closing bracket of the same kind
JSON_SPAN_PATTERN = re.compile(r"(\[[\s\S]*\]|\{[\s\S]*\})")


def extract_json_span(text: str) -> str:
    """Return the first array/object span in ``text``, or ``text`` unchanged."""
    match = JSON_SPAN_PATTERN.search(text)
    return match.group(0) if match else text


def parse_candidate_records(text: str) -> list[CandidateRecord]:
    """
    Parse an extracted span into candidate records.

    No partial recovery: any decode error (including nesting too deep to
    decode), a non-array payload, or a single malformed record rejects the
    whole response. Records are validated before grounding, so a malformed
    record rejects the reply even if it would later have been dropped as
    unverified.
    """
    if not text or not text.strip():
        raise InvalidResponse()

    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.error("Failed to parse JSON response", error=str(e), response=text[:500])
        raise InvalidResponse() from e

    if not isinstance(payload, list):
        logger.error("Response not an array", payload_type=type(payload).__name__)
        raise InvalidResponse("AI response was not an array. Please try again.")

    records = []
    for index, item in enumerate(payload):
        try:
            records.append(CandidateRecord.model_validate(item))
        except ValidationError as e:
            logger.error("Malformed restaurant record", index=index, error=str(e))
            raise InvalidResponse() from e

    return records
