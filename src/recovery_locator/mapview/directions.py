"""Driving-directions links between the user and a feature."""

from __future__ import annotations

from urllib.parse import urlencode

from recovery_locator.core.types import Coordinate

GOOGLE_DIRECTIONS_URL = "https://www.google.com/maps/dir/"


def _lat_lon(coordinate: Coordinate) -> str:
    return f"{coordinate.latitude},{coordinate.longitude}"


def directions_url(
    origin: Coordinate,
    destination: Coordinate,
    base_url: str = GOOGLE_DIRECTIONS_URL,
) -> str:
    """Directions URL from *origin* to *destination* (both WGS84)."""
    query = urlencode(
        {"api": 1, "origin": _lat_lon(origin), "destination": _lat_lon(destination)},
        safe=",",
    )
    return f"{base_url}?{query}"
