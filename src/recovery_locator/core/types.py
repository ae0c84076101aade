"""Core type definitions shared across all locator modules."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from shapely.geometry import Point

WGS84_WKID = 4326
WEB_MERCATOR_WKID = 3857


class Coordinate(BaseModel):
    """A longitude/latitude pair in a given spatial reference.

    Immutable; a new coordinate replaces the old one on re-fetch.
    """

    model_config = {"frozen": True}

    longitude: float
    latitude: float
    wkid: int = WGS84_WKID

    def to_point(self) -> Point:
        return Point(self.longitude, self.latitude)


class HealthStatus(BaseModel):
    """Health check response for any service."""

    service: str
    healthy: bool
    latency_ms: float | None = None
    details: dict[str, Any] = Field(default_factory=dict)
