#!/usr/bin/env python3
"""Submit demo locations through a running locator backend.

Usage:
    # Start the backend first:
    uvicorn recovery_locator.web.app:create_app --factory --port 8080

    # Submit the demo locations:
    python3 scripts/seed_locations.py

    # Against a different host:
    python3 scripts/seed_locations.py --base-url http://localhost:9000

Every location goes through the public API, so it is geocoded and added
to the configured feature service exactly as a form submission would be.
Point LOCATOR_ARCGIS_FEATURE_SERVICE_URL at a scratch layer first.
"""

from __future__ import annotations

import argparse
import sys

import httpx

DEFAULT_BASE_URL = "http://localhost:8080"

DEMO_LOCATIONS = [
    {
        "street_number": "1800",
        "street_name": "Colonial Dr",
        "state": "SC",
        "zip_code": "29203",
        "name": "Columbia Recovery Clinic",
        "naloxone_strips": 1,
    },
    {
        "street_number": "2100",
        "street_name": "Bull St",
        "state": "SC",
        "zip_code": "29201",
        "name": "Bull Street Harm Reduction",
        "naloxone_strips": 0,
    },
    {
        "street_number": "1333",
        "street_name": "Main St",
        "state": "SC",
        "zip_code": "29201",
        "name": "Main Street Outreach",
        "naloxone_strips": 1,
    },
]


def api(
    client: httpx.Client,
    method: str,
    path: str,
    *,
    json: dict | None = None,
) -> dict | None:
    """Make an API call and return parsed JSON, or None on failure."""
    resp = client.request(method, path, json=json)
    if resp.status_code >= 400:
        print(f"  FAILED {method} {path} -> {resp.status_code}: {resp.text[:200]}")
        return None
    return resp.json()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Submit demo locations to a running locator backend"
    )
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"Backend base URL (default: {DEFAULT_BASE_URL})",
    )
    args = parser.parse_args()

    print(f"Target: {args.base_url}")

    with httpx.Client(base_url=args.base_url, timeout=60.0) as client:
        try:
            health = api(client, "GET", "/api/health")
        except httpx.ConnectError:
            health = None
        if not health:
            print(f"\nERROR: Cannot reach {args.base_url}. Start the backend first:")
            print("  uvicorn recovery_locator.web.app:create_app --factory --port 8080")
            sys.exit(1)

        view = api(client, "POST", "/api/views", json={"supported": False})
        if view is None:
            sys.exit(1)
        view_id = view["view_id"]
        print(f"View {view_id}: {view['feature_count']} features before seeding")

        added = 0
        for location in DEMO_LOCATIONS:
            result = api(client, "POST", f"/api/views/{view_id}/locations", json=location)
            if result is None:
                continue
            outcome = result["outcome"]
            print(f"  {location['name']}: {outcome['message']}")
            if outcome["status"] == "added":
                added += 1

        view = api(client, "GET", f"/api/views/{view_id}")
        if view is not None:
            print(f"View {view_id}: {view['feature_count']} features after seeding")
        print(f"Added {added}/{len(DEMO_LOCATIONS)} locations.")


if __name__ == "__main__":
    main()
