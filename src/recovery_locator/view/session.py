"""Per-page view sessions with in-memory storage.

A view session holds everything one open locator page needs: the
resolved user location, the availability filter, the map presenter, the
current query result and the add-location flow. Sessions live in memory,
which suits a single-instance deployment.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from recovery_locator.arcgis.models import Feature, FeatureSet
from recovery_locator.core.types import Coordinate
from recovery_locator.geo.location import ResolvedLocation
from recovery_locator.mapview.presenter import MapPresenter
from recovery_locator.submission.flow import LocationSubmissionFlow


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ViewSession:
    """State of one live map view."""

    location: ResolvedLocation
    presenter: MapPresenter
    view_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    available_only: bool = False
    feature_set: FeatureSet | None = None
    nearest: Feature | None = None
    loading: bool = False
    generation: int = 0
    submission: LocationSubmissionFlow | None = None
    created_at: datetime = field(default_factory=_now)
    last_active: datetime = field(default_factory=_now)

    @property
    def user_location(self) -> Coordinate:
        return self.location.coordinate

    def touch(self) -> None:
        self.last_active = _now()


class ViewSessionManager:
    """In-memory view session store."""

    def __init__(self) -> None:
        self._sessions: dict[str, ViewSession] = {}

    def add(self, session: ViewSession) -> ViewSession:
        self._sessions[session.view_id] = session
        return session

    def get(self, view_id: str) -> ViewSession | None:
        """Retrieve a session by ID, or None."""
        return self._sessions.get(view_id)

    def remove(self, view_id: str) -> bool:
        return self._sessions.pop(view_id, None) is not None

    def list_active(self) -> list[ViewSession]:
        """Return all sessions, most recently active first."""
        return sorted(
            self._sessions.values(),
            key=lambda s: s.last_active,
            reverse=True,
        )
