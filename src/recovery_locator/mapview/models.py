"""Map view state models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from recovery_locator.core.types import Coordinate


class MarkerKind(str, Enum):
    """Role of a marker on the map."""

    USER = "user"
    NEAREST = "nearest"
    FEATURE = "feature"
    ADDED = "added"


class PopupRow(BaseModel):
    label: str
    value: str


class Popup(BaseModel):
    """Popup content: a title and label/value rows."""

    title: str
    rows: list[PopupRow] = Field(default_factory=list)


class Marker(BaseModel):
    """A single point drawn on the map."""

    marker_id: str
    kind: MarkerKind
    coordinate: Coordinate
    color: str
    size: int = 8
    popup: Popup | None = None


class MapView(BaseModel):
    """The one live view: camera plus the visible marker set."""

    center: Coordinate
    zoom: int
    markers: list[Marker] = Field(default_factory=list)
    open_popup: str | None = None

    def marker(self, marker_id: str) -> Marker | None:
        for m in self.markers:
            if m.marker_id == marker_id:
                return m
        return None

    def markers_of(self, kind: MarkerKind) -> list[Marker]:
        return [m for m in self.markers if m.kind == kind]
