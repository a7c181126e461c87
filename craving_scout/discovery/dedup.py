"""Collapse verified restaurants that resolve to the same maps URI."""

from collections.abc import Sequence

from craving_scout.discovery.models import VerifiedRestaurant


def deduplicate_by_uri(restaurants: Sequence[VerifiedRestaurant]) -> list[VerifiedRestaurant]:
    """
    Keep one restaurant per maps URI.

    The kept entry is the one with the most reviews (first seen on ties).
    Survivors stay in their original order: the model's ranking is
    authoritative and is never re-sorted here.
    """
    best_index: dict[str, int] = {}

    for i, restaurant in enumerate(restaurants):
        current = best_index.get(restaurant.maps_url)
        if current is None:
            best_index[restaurant.maps_url] = i
        elif restaurant.google_reviews_count > restaurants[current].google_reviews_count:
            best_index[restaurant.maps_url] = i

    return [r for i, r in enumerate(restaurants) if best_index[r.maps_url] == i]
