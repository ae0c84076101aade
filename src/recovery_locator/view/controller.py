"""Query cycle: resolve location, query features, select nearest, render."""

from __future__ import annotations

import logging

from recovery_locator.arcgis.features import FeatureServiceClient
from recovery_locator.arcgis.geocode import GeocodeClient
from recovery_locator.core.config import Settings
from recovery_locator.core.types import WGS84_WKID, Coordinate
from recovery_locator.geo.location import GeolocationResolver, LocationProvider
from recovery_locator.geo.nearest import project_feature, select_nearest_index
from recovery_locator.mapview.directions import directions_url
from recovery_locator.mapview.models import MapView
from recovery_locator.mapview.presenter import MapPresenter
from recovery_locator.submission.flow import LocationSubmissionFlow
from recovery_locator.view.session import ViewSession, ViewSessionManager

logger = logging.getLogger(__name__)

NEAREST_NOT_FOUND = "Nearest location not found yet."


class NearestNotFoundError(LookupError):
    """Directions were requested before any nearest feature was known."""


class LocatorController:
    """Drives view sessions through query cycles.

    A cycle clears and refills a session's markers in a single presenter
    call after the query and the nearest selection have both completed.
    Each cycle takes a generation number; a response belonging to a
    superseded cycle is dropped.
    """

    def __init__(
        self,
        features: FeatureServiceClient,
        geocoder: GeocodeClient,
        settings: Settings | None = None,
        sessions: ViewSessionManager | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._features = features
        self._geocoder = geocoder
        self.sessions = sessions or ViewSessionManager()
        map_config = self._settings.map
        self.resolver = GeolocationResolver(
            Coordinate(
                longitude=map_config.default_longitude,
                latitude=map_config.default_latitude,
            )
        )

    async def open_view(self, provider: LocationProvider | None) -> ViewSession:
        """Resolve the user location and register a new, empty view."""
        location = await self.resolver.resolve(provider)
        presenter = MapPresenter(
            center=location.coordinate,
            map_config=self._settings.map,
            arcgis_config=self._settings.arcgis,
        )
        session = ViewSession(location=location, presenter=presenter)

        async def refresh_after_add() -> None:
            await self.refresh(session)

        session.submission = LocationSubmissionFlow(
            geocoder=self._geocoder,
            features=self._features,
            presenter=presenter,
            on_feature_added=refresh_after_add,
            config=self._settings.arcgis,
        )
        self.sessions.add(session)
        logger.info("Opened view %s at %s", session.view_id, location.coordinate)
        return session

    async def refresh(self, session: ViewSession) -> MapView | None:
        """Run one query cycle for *session*.

        Query errors propagate and leave the visible markers untouched.
        Returns None when a newer cycle superseded this one.
        """
        session.generation += 1
        generation = session.generation
        session.loading = True
        session.touch()
        try:
            feature_set = await self._features.query(available_only=session.available_only)
        finally:
            if generation == session.generation:
                session.loading = False

        if generation != session.generation:
            logger.info("Discarding stale query result for view %s", session.view_id)
            return None

        user = session.user_location
        nearest_index = None
        if feature_set.features:
            nearest_index = select_nearest_index(
                user, feature_set.features, self._settings.map.working_wkid
            )

        session.feature_set = feature_set
        session.nearest = feature_set.features[nearest_index] if nearest_index is not None else None
        return session.presenter.replace_features(user, feature_set, nearest_index)

    async def set_filter(self, session: ViewSession, available_only: bool) -> MapView | None:
        session.available_only = available_only
        return await self.refresh(session)

    def directions(self, session: ViewSession) -> str:
        """Directions URL from the user to the nearest feature.

        Raises:
            NearestNotFoundError: If no nearest feature is known yet.
        """
        if session.nearest is None:
            raise NearestNotFoundError(NEAREST_NOT_FOUND)
        point = project_feature(session.nearest, WGS84_WKID)
        return directions_url(
            session.user_location,
            Coordinate(longitude=point.x, latitude=point.y),
            base_url=self._settings.map.directions_url,
        )

    async def close(self) -> None:
        await self._features.close()
        await self._geocoder.close()
