"""Map presenter: sole owner of the view's marker layer."""

from __future__ import annotations

import logging
from typing import Any

from recovery_locator.arcgis.models import Feature, FeatureSet
from recovery_locator.core.config import ArcGISConfig, MapConfig
from recovery_locator.core.types import WGS84_WKID, Coordinate
from recovery_locator.geo.nearest import project_feature
from recovery_locator.mapview.models import MapView, Marker, MarkerKind, Popup, PopupRow
from recovery_locator.mapview.render import render_html

logger = logging.getLogger(__name__)

USER_COLOR = "blue"
NEAREST_AVAILABLE_COLOR = "purple"
NEAREST_COLOR = "red"
AVAILABLE_COLOR = "darkgreen"
FEATURE_COLOR = "gray"
ADDED_COLOR = "green"

LARGE_SIZE = 12
SMALL_SIZE = 8

USER_MARKER_ID = "user"
NEAREST_MARKER_ID = "nearest"


class MapPresenter:
    """Owns the single live MapView and every change to its markers.

    Other components read ``view`` and may only append through
    ``add_marker`` / ``show_added_location`` and move the camera through
    ``go_to``.
    """

    def __init__(
        self,
        center: Coordinate,
        map_config: MapConfig | None = None,
        arcgis_config: ArcGISConfig | None = None,
    ) -> None:
        self._map_config = map_config or MapConfig()
        self._arcgis_config = arcgis_config or ArcGISConfig()
        self._view = MapView(center=center, zoom=self._map_config.zoom)
        self._added_count = 0

    @property
    def view(self) -> MapView:
        return self._view

    # -- marker set ----------------------------------------------------------

    def replace_features(
        self,
        user: Coordinate,
        feature_set: FeatureSet,
        nearest_index: int | None,
    ) -> MapView:
        """Replace the visible marker set in one step.

        Order: user marker, nearest marker (if any), then every other
        feature. The nearest marker's popup is opened.
        """
        labels = feature_set.field_labels
        markers = [
            Marker(
                marker_id=USER_MARKER_ID,
                kind=MarkerKind.USER,
                coordinate=user,
                color=USER_COLOR,
                size=LARGE_SIZE,
            )
        ]
        features = feature_set.features
        if nearest_index is not None:
            nearest = features[nearest_index]
            color = NEAREST_AVAILABLE_COLOR if self._available(nearest) else NEAREST_COLOR
            markers.append(
                self._feature_marker(nearest, NEAREST_MARKER_ID, MarkerKind.NEAREST, color, LARGE_SIZE, labels)
            )

        for index, feature in enumerate(features):
            if index == nearest_index:
                continue
            color = AVAILABLE_COLOR if self._available(feature) else FEATURE_COLOR
            markers.append(
                self._feature_marker(feature, f"feature-{index}", MarkerKind.FEATURE, color, SMALL_SIZE, labels)
            )

        self._view = self._view.model_copy(
            update={
                "markers": markers,
                "open_popup": NEAREST_MARKER_ID if nearest_index is not None else None,
            }
        )
        logger.debug("Rendered %d markers", len(markers))
        return self._view

    def add_marker(self, marker: Marker) -> None:
        self._view = self._view.model_copy(update={"markers": [*self._view.markers, marker]})

    def show_added_location(self, coordinate: Coordinate, name: str = "") -> Marker:
        """Append a highlighted marker for a just-added location and pan to it."""
        self._added_count += 1
        marker = Marker(
            marker_id=f"added-{self._added_count}",
            kind=MarkerKind.ADDED,
            coordinate=coordinate,
            color=ADDED_COLOR,
            size=LARGE_SIZE,
            popup=Popup(title=name or self._map_config.default_title),
        )
        self.add_marker(marker)
        self.go_to(coordinate, self._map_config.added_zoom)
        return marker

    def go_to(self, coordinate: Coordinate, zoom: int | None = None) -> None:
        self._view = self._view.model_copy(
            update={"center": coordinate, "zoom": zoom if zoom is not None else self._view.zoom}
        )

    # -- popups --------------------------------------------------------------

    def popup_for(self, feature: Feature, labels: dict[str, str] | None = None) -> Popup:
        """Popup listing every attribute of *feature*.

        Attributes named by the layer's fields but absent from the feature
        are listed too, with the placeholder value.
        """
        labels = labels or {}
        names = list(labels)
        names.extend(name for name in feature.attributes if name not in labels)
        rows = [
            PopupRow(label=labels.get(name, name), value=self.format_value(feature, name))
            for name in names
        ]
        title = feature.attributes.get(self._arcgis_config.display_field)
        return Popup(title=str(title) if title else self._map_config.default_title, rows=rows)

    def format_value(self, feature: Feature, name: str) -> str:
        value = feature.attributes.get(name)
        if value is None or value == "":
            return self._map_config.placeholder
        if name == self._arcgis_config.availability_field:
            return "Yes" if feature.is_available(name) else "No"
        return str(value)

    # -- rendering -----------------------------------------------------------

    def render_html(self) -> str:
        return render_html(self._view, tiles=self._map_config.tiles)

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready copy of the current view."""
        return self._view.model_dump(mode="json")

    # -- internal ------------------------------------------------------------

    def _available(self, feature: Feature) -> bool:
        return feature.is_available(self._arcgis_config.availability_field)

    def _feature_marker(
        self,
        feature: Feature,
        marker_id: str,
        kind: MarkerKind,
        color: str,
        size: int,
        labels: dict[str, str],
    ) -> Marker:
        point = project_feature(feature, WGS84_WKID)
        return Marker(
            marker_id=marker_id,
            kind=kind,
            coordinate=Coordinate(longitude=point.x, latitude=point.y),
            color=color,
            size=size,
            popup=self.popup_for(feature, labels),
        )
