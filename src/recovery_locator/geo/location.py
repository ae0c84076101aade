"""Resolution of the user's position with a fixed fallback."""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel

from recovery_locator.core.types import Coordinate

logger = logging.getLogger(__name__)

UNSUPPORTED_NOTICE = "Geolocation is not supported by this browser."
FAILED_NOTICE = "Unable to retrieve your location. Using default location."


class GeolocationError(Exception):
    """The position request failed (denied, timed out, unavailable)."""


class LocationProvider(Protocol):
    """Anything that can asynchronously report the device position."""

    async def current_position(self) -> Coordinate: ...


class ReportedLocationProvider:
    """Provider backed by what the browser reported for the page.

    Either a coordinate pair or an error message is expected; an error, or
    a missing coordinate, makes ``current_position`` raise.
    """

    def __init__(
        self,
        longitude: float | None = None,
        latitude: float | None = None,
        error: str | None = None,
    ) -> None:
        self._longitude = longitude
        self._latitude = latitude
        self._error = error

    async def current_position(self) -> Coordinate:
        if self._error:
            raise GeolocationError(self._error)
        if self._longitude is None or self._latitude is None:
            raise GeolocationError("No position reported")
        return Coordinate(longitude=self._longitude, latitude=self._latitude)


class ResolvedLocation(BaseModel):
    """Outcome of a resolution: always carries a coordinate."""

    coordinate: Coordinate
    used_fallback: bool = False
    notice: str | None = None


class GeolocationResolver:
    """Obtains the user's coordinate, substituting *default* on failure."""

    def __init__(self, default: Coordinate) -> None:
        self.default = default

    async def resolve(self, provider: LocationProvider | None) -> ResolvedLocation:
        """Await *provider* once; fall back to the default coordinate.

        A ``None`` provider means the capability is missing altogether.
        """
        if provider is None:
            logger.warning("Geolocation unsupported, using default %s", self.default)
            return self._fallback(UNSUPPORTED_NOTICE)

        try:
            coordinate = await provider.current_position()
        except GeolocationError as exc:
            logger.warning("Geolocation error: %s", exc)
            return self._fallback(FAILED_NOTICE)

        return ResolvedLocation(coordinate=coordinate)

    def _fallback(self, notice: str) -> ResolvedLocation:
        return ResolvedLocation(coordinate=self.default, used_fallback=True, notice=notice)
