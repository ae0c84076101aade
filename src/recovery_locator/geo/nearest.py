"""Nearest-feature selection by planar distance in a projected reference."""

from __future__ import annotations

from collections.abc import Sequence

from shapely.geometry import Point

from recovery_locator.arcgis.models import Feature
from recovery_locator.core.types import WEB_MERCATOR_WKID, Coordinate
from recovery_locator.geo.projection import project


def project_coordinate(coordinate: Coordinate, to_wkid: int) -> Point:
    return project(coordinate.to_point(), coordinate.wkid, to_wkid)


def project_feature(feature: Feature, to_wkid: int) -> Point:
    geometry = feature.geometry
    return project(Point(geometry.x, geometry.y), geometry.wkid, to_wkid)


def distances(
    user: Coordinate,
    features: Sequence[Feature],
    working_wkid: int = WEB_MERCATOR_WKID,
) -> list[float]:
    """Distance from *user* to each feature, in metres on the projected plane."""
    origin = project_coordinate(user, working_wkid)
    return [origin.distance(project_feature(f, working_wkid)) for f in features]


def select_nearest_index(
    user: Coordinate,
    features: Sequence[Feature],
    working_wkid: int = WEB_MERCATOR_WKID,
) -> int:
    """Index of the feature closest to *user*.

    Every geometry is projected once. Ties go to the earliest feature.

    Raises:
        ValueError: If *features* is empty.
    """
    if not features:
        raise ValueError("Cannot select the nearest of zero features")

    best_index = 0
    best_distance = float("inf")
    for index, distance in enumerate(distances(user, features, working_wkid)):
        if distance < best_distance:
            best_index, best_distance = index, distance
    return best_index


def select_nearest(
    user: Coordinate,
    features: Sequence[Feature],
    working_wkid: int = WEB_MERCATOR_WKID,
) -> Feature:
    """Return the feature closest to *user* (see ``select_nearest_index``)."""
    return features[select_nearest_index(user, features, working_wkid)]
