"""Map view state, presenter and rendering."""

from recovery_locator.mapview.directions import directions_url
from recovery_locator.mapview.models import MapView, Marker, MarkerKind
from recovery_locator.mapview.presenter import MapPresenter

__all__ = ["MapPresenter", "MapView", "Marker", "MarkerKind", "directions_url"]
