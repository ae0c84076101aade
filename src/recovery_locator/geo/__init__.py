"""Geolocation, projection and nearest-feature selection."""

from recovery_locator.geo.location import GeolocationResolver, ResolvedLocation
from recovery_locator.geo.nearest import select_nearest, select_nearest_index

__all__ = ["GeolocationResolver", "ResolvedLocation", "select_nearest", "select_nearest_index"]
