"""Wire models for the ArcGIS REST geocoding and feature services."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from recovery_locator.core.types import WGS84_WKID, Coordinate

AttributeValue = str | int | float | bool | None


class SpatialReference(BaseModel):
    """Spatial reference of a geometry, as sent by ArcGIS."""

    model_config = {"frozen": True, "populate_by_name": True}

    wkid: int = WGS84_WKID
    latest_wkid: int | None = Field(default=None, alias="latestWkid")


class PointGeometry(BaseModel):
    """A point geometry in ArcGIS JSON form."""

    model_config = {"frozen": True, "populate_by_name": True}

    x: float
    y: float
    spatial_reference: SpatialReference = Field(
        default_factory=SpatialReference, alias="spatialReference"
    )

    @property
    def wkid(self) -> int:
        return self.spatial_reference.latest_wkid or self.spatial_reference.wkid

    def to_coordinate(self) -> Coordinate:
        return Coordinate(longitude=self.x, latitude=self.y, wkid=self.wkid)

    @classmethod
    def from_coordinate(cls, coordinate: Coordinate) -> PointGeometry:
        return cls(
            x=coordinate.longitude,
            y=coordinate.latitude,
            spatial_reference=SpatialReference(wkid=coordinate.wkid),
        )


class Feature(BaseModel):
    """A point of interest returned by the feature service.

    Features are immutable snapshots; the client holds no identity for them
    beyond their position in the result set.
    """

    model_config = {"frozen": True}

    geometry: PointGeometry
    attributes: dict[str, AttributeValue] = Field(default_factory=dict)

    def is_available(self, field: str) -> bool:
        """True when the 0/1 availability attribute *field* equals 1."""
        value = self.attributes.get(field)
        if value is None or isinstance(value, bool):
            return bool(value)
        try:
            return int(value) == 1
        except (TypeError, ValueError):
            return False


class FieldInfo(BaseModel):
    """Field descriptor from a query response."""

    name: str
    alias: str | None = None
    type: str | None = None

    @property
    def label(self) -> str:
        return self.alias or self.name


class FeatureSet(BaseModel):
    """Result of a feature query: field descriptors plus features."""

    fields: list[FieldInfo] = Field(default_factory=list)
    features: list[Feature] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.features)

    @property
    def field_labels(self) -> dict[str, str]:
        return {f.name: f.label for f in self.fields}


class GeocodeLocation(BaseModel):
    x: float
    y: float


class GeocodeCandidate(BaseModel):
    """A candidate returned by findAddressCandidates."""

    address: str = ""
    location: GeocodeLocation
    score: float = 0.0
    attributes: dict[str, Any] = Field(default_factory=dict)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(longitude=self.location.x, latitude=self.location.y)


class AddResult(BaseModel):
    """One entry of an addFeatures response."""

    model_config = {"populate_by_name": True}

    success: bool = False
    object_id: int | None = Field(default=None, alias="objectId")
    error: dict[str, Any] | None = None


class NewFeature(BaseModel):
    """Payload for adding a single feature."""

    attributes: dict[str, AttributeValue]
    geometry: PointGeometry

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude={"geometry": {"spatial_reference": {"latest_wkid"}}},
        )
