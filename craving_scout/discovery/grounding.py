"""
Grounding index and verification.

Gemini returns Google Maps grounding chunks alongside its text. Each chunk
names a matched place and carries its maps URI. A candidate is only shown
if its name resolves to one of those chunks; the URI always comes from the
chunk, never from the model text.
"""

from collections.abc import Iterable
from typing import Any

import structlog

from craving_scout.discovery.models import (
    CandidateRecord,
    GroundingEntry,
    GroundingHint,
    VerifiedRestaurant,
)

logger = structlog.get_logger()


def normalize_name(name: str) -> str:
    """Key used on both sides of the join: trimmed and case-folded."""
    return name.strip().casefold()


def extract_grounding_hints(response: Any) -> list[GroundingHint]:
    """Pull maps grounding chunks out of a google-genai response."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    hints = []
    for chunk in chunks:
        maps = getattr(chunk, "maps", None)
        if maps is None:
            continue
        title = getattr(maps, "title", None)
        if not title:
            continue
        hints.append(GroundingHint(title=title, uri=getattr(maps, "uri", None) or ""))

    return hints


class GroundingIndex:
    """Normalized venue name -> authoritative title and maps URI."""

    def __init__(self) -> None:
        self._entries: dict[str, GroundingEntry] = {}

    @classmethod
    def from_hints(cls, hints: Iterable[GroundingHint]) -> "GroundingIndex":
        index = cls()
        for hint in hints:
            index.add(hint)
        return index

    def add(self, hint: GroundingHint) -> None:
        # Later hints for the same key replace earlier ones
        self._entries[normalize_name(hint.title)] = GroundingEntry(title=hint.title, uri=hint.uri)

    def lookup(self, name: str) -> GroundingEntry | None:
        return self._entries.get(normalize_name(name))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return normalize_name(name) in self._entries


def verify_candidates(
    candidates: Iterable[CandidateRecord],
    index: GroundingIndex,
) -> list[VerifiedRestaurant]:
    """
    Join candidates against the grounding index, in order.

    Candidates without an entry, or whose entry has no URI, are dropped.
    That is expected: the model often names places the maps tool did not
    confirm.
    """
    verified = []
    for candidate in candidates:
        entry = index.lookup(candidate.name)
        if entry is None or not entry.uri:
            logger.warning("No Maps data for restaurant", restaurant=candidate.name)
            continue

        verified.append(
            VerifiedRestaurant(
                name=candidate.name,
                ai_rating=candidate.ai_rating,
                google_rating=candidate.google_rating,
                google_reviews_count=candidate.google_reviews_count,
                pros=list(candidate.pros),
                cons=list(candidate.cons),
                maps_url=entry.uri,
                title=entry.title or candidate.name,
            )
        )

    return verified
