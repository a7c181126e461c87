#!/usr/bin/env python3
"""Run a restaurant search against a running server and print the results."""

import argparse
import json
import sys
import requests


def main():
    parser = argparse.ArgumentParser(description="Search for restaurants near a location")
    parser.add_argument("query", help="What you are craving, e.g. 'spicy ramen'")
    parser.add_argument("--lat", type=float, required=True, help="Latitude in degrees")
    parser.add_argument("--lng", type=float, required=True, help="Longitude in degrees")
    parser.add_argument("--filter", action="append", default=[], dest="filters", help="Attribute filter (repeatable)")
    parser.add_argument("--premium", action="store_true", help="Use the elevated model")
    parser.add_argument("--language", default="en", choices=["en", "ar"])
    parser.add_argument("--url", default="http://localhost:8000", help="Server base URL")
    parser.add_argument("--output", help="Optional path to save the raw JSON response")
    args = parser.parse_args()

    payload = {
        "location": {"latitude": args.lat, "longitude": args.lng},
        "query": args.query,
        "filters": args.filters,
        "isPremium": args.premium,
        "language": args.language,
    }

    print(f"Searching: {args.query} @ ({args.lat}, {args.lng})")
    print("-" * 50)

    response = requests.post(f"{args.url}/api/search", json=payload, timeout=120)
    data = response.json()

    if not response.ok:
        print(f"[{data.get('errorType', 'UNKNOWN')}] {data.get('error', 'Search failed')}")
        sys.exit(1)

    restaurants = data.get("restaurants", [])
    if not restaurants:
        print(data.get("message", "No restaurants found."))

    for i, r in enumerate(restaurants, 1):
        print(f"\n[{i}] {r['title']}  AI {r['aiRating']}  (Google {r['googleRating']}, {r['googleReviewsCount']} reviews)")
        print(f"    {r['mapsUrl']}")
        for pro in r["pros"]:
            print(f"    + {pro}")
        for con in r["cons"]:
            print(f"    - {con}")

    usage = data.get("tokenUsage")
    if usage:
        print(f"\nTokens: {usage['inputTokens']} in / {usage['outputTokens']} out ({usage['modelUsed']})")

    if args.output:
        with open(args.output, "w") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        print(f"\nSaved response to {args.output}")

if __name__ == "__main__":
    main()
