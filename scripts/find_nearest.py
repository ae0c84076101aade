#!/usr/bin/env python3
"""CLI script to find the recovery center nearest to a coordinate.

Usage:
    python3 scripts/find_nearest.py --lon -81.0348 --lat 34.0007
    python3 scripts/find_nearest.py --lon -81.0348 --lat 34.0007 --available-only
    python3 scripts/find_nearest.py --lon -81.0348 --lat 34.0007 --html map.html
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from recovery_locator.arcgis.features import FeatureServiceClient
from recovery_locator.core.config import Settings
from recovery_locator.core.types import WGS84_WKID, Coordinate
from recovery_locator.geo.nearest import distances, project_feature, select_nearest_index
from recovery_locator.mapview.directions import directions_url
from recovery_locator.mapview.presenter import MapPresenter


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find the nearest recovery center to a longitude/latitude."
    )
    settings = Settings()
    parser.add_argument("--lon", type=float, default=settings.map.default_longitude)
    parser.add_argument("--lat", type=float, default=settings.map.default_latitude)
    parser.add_argument(
        "--available-only",
        action="store_true",
        help="Only consider centers with naloxone strips available.",
    )
    parser.add_argument(
        "--html",
        type=str,
        default=None,
        help="Write the rendered map to this HTML file.",
    )
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    settings = Settings()
    user = Coordinate(longitude=args.lon, latitude=args.lat)

    client = FeatureServiceClient(settings.arcgis)
    try:
        feature_set = await client.query(available_only=args.available_only)
    finally:
        await client.close()

    if not feature_set.features:
        print("No features returned.")
        sys.exit(1)

    index = select_nearest_index(user, feature_set.features, settings.map.working_wkid)
    nearest = feature_set.features[index]
    distance = distances(user, [nearest], settings.map.working_wkid)[0]

    presenter = MapPresenter(center=user, map_config=settings.map, arcgis_config=settings.arcgis)
    presenter.replace_features(user, feature_set, index)
    popup = presenter.popup_for(nearest, feature_set.field_labels)

    print(f"Searched {len(feature_set)} features.")
    print(f"Nearest: {popup.title} ({distance / 1000:.2f} km, projected)")
    for row in popup.rows:
        print(f"  {row.label}: {row.value}")
    point = project_feature(nearest, WGS84_WKID)
    destination = Coordinate(longitude=point.x, latitude=point.y)
    print("Directions: " + directions_url(user, destination, settings.map.directions_url))

    if args.html:
        Path(args.html).write_text(presenter.render_html())
        print(f"Map written to {args.html}")


if __name__ == "__main__":
    asyncio.run(main())
