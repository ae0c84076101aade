"""Projection of point geometries between spatial references."""

from __future__ import annotations

from functools import lru_cache

from pyproj import Transformer
from shapely.geometry import Point

from recovery_locator.core.types import WEB_MERCATOR_WKID

# ESRI identifiers for Web Mercator that EPSG does not know
_WKID_ALIASES: dict[int, int] = {
    102100: WEB_MERCATOR_WKID,
    102113: WEB_MERCATOR_WKID,
    900913: WEB_MERCATOR_WKID,
}


def normalize_wkid(wkid: int) -> int:
    return _WKID_ALIASES.get(wkid, wkid)


@lru_cache(maxsize=16)
def get_transformer(from_wkid: int, to_wkid: int) -> Transformer:
    """Return a cached x/y-ordered transformer between two EPSG codes."""
    return Transformer.from_crs(
        f"EPSG:{normalize_wkid(from_wkid)}",
        f"EPSG:{normalize_wkid(to_wkid)}",
        always_xy=True,
    )


def project(point: Point, from_wkid: int, to_wkid: int) -> Point:
    """Project *point* from one spatial reference to another."""
    if normalize_wkid(from_wkid) == normalize_wkid(to_wkid):
        return point
    x, y = get_transformer(from_wkid, to_wkid).transform(point.x, point.y)
    return Point(x, y)
