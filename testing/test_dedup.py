from craving_scout.discovery.dedup import deduplicate_by_uri
from craving_scout.discovery.models import VerifiedRestaurant


def _restaurant(name, uri, reviews):
    return VerifiedRestaurant(
        name=name,
        ai_rating=4.5,
        google_rating=4.4,
        google_reviews_count=reviews,
        pros=["a", "b", "c"],
        cons=["d", "e", "f"],
        maps_url=uri,
        title=name,
    )


def test_one_entry_per_uri_with_most_reviews():
    restaurants = [
        _restaurant("Ramen House", "uri-1", 500),
        _restaurant("ramen house", "uri-1", 1200),
    ]

    result = deduplicate_by_uri(restaurants)

    assert len(result) == 1
    assert result[0].google_reviews_count == 1200


def test_tie_keeps_first_seen():
    restaurants = [
        _restaurant("First", "uri-1", 300),
        _restaurant("Second", "uri-1", 300),
    ]

    assert [r.name for r in deduplicate_by_uri(restaurants)] == ["First"]


def test_survivors_keep_input_order():
    restaurants = [
        _restaurant("A", "uri-a", 10),
        _restaurant("B", "uri-b", 50),
        _restaurant("A-bigger", "uri-a", 900),
        _restaurant("C", "uri-c", 5),
        _restaurant("B-smaller", "uri-b", 1),
    ]

    result = deduplicate_by_uri(restaurants)

    assert [r.name for r in result] == ["B", "A-bigger", "C"]
    # Output is a subsequence of the input
    positions = [restaurants.index(r) for r in result]
    assert positions == sorted(positions)


def test_identical_duplicates_collapse_to_one():
    restaurants = [_restaurant("A", "uri-a", 10), _restaurant("A", "uri-a", 10)]

    assert len(deduplicate_by_uri(restaurants)) == 1


def test_no_duplicates_is_unchanged():
    restaurants = [_restaurant("A", "uri-a", 10), _restaurant("B", "uri-b", 20)]

    assert deduplicate_by_uri(restaurants) == restaurants


def test_empty_input():
    assert deduplicate_by_uri([]) == []
