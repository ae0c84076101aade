"""Shared test fixtures and fake ArcGIS clients."""

from __future__ import annotations

from typing import Any

import pytest

from recovery_locator.arcgis.models import (
    AddResult,
    Feature,
    FeatureSet,
    FieldInfo,
    GeocodeCandidate,
    NewFeature,
)
from recovery_locator.core.config import ArcGISConfig
from recovery_locator.core.types import Coordinate

COLUMBIA = Coordinate(longitude=-81.0348, latitude=34.0007)

FIELDS = [
    {"name": "OBJECTID", "alias": "OBJECTID", "type": "esriFieldTypeOID"},
    {"name": "name", "alias": "Name", "type": "esriFieldTypeString"},
    {"name": "address", "alias": "Address", "type": "esriFieldTypeString"},
    {"name": "city", "alias": "City", "type": "esriFieldTypeString"},
    {"name": "Naloxone_Strips", "alias": "Naloxone Strips", "type": "esriFieldTypeInteger"},
]

RAW_FEATURES: list[dict[str, Any]] = [
    {
        "geometry": {"x": -81.03, "y": 34.00, "spatialReference": {"wkid": 4326}},
        "attributes": {
            "OBJECTID": 1,
            "name": "Columbia Recovery",
            "address": "1800 Colonial Dr",
            "city": "Columbia",
            "Naloxone_Strips": 1,
        },
    },
    {
        "geometry": {"x": -81.23, "y": 33.98, "spatialReference": {"wkid": 4326}},
        "attributes": {
            "OBJECTID": 2,
            "name": "Lexington Outreach",
            "address": "5 Main St",
            "city": "Lexington",
            "Naloxone_Strips": 0,
        },
    },
    {
        "geometry": {"x": -80.34, "y": 33.92, "spatialReference": {"wkid": 4326}},
        "attributes": {
            "OBJECTID": 3,
            "name": "Sumter Clinic",
            "address": "12 Liberty St",
            "city": "Sumter",
            "Naloxone_Strips": 1,
        },
    },
    {
        "geometry": {"x": -80.60, "y": 34.25, "spatialReference": {"wkid": 4326}},
        "attributes": {
            "OBJECTID": 4,
            "name": "Camden Center",
            "address": None,
            "Naloxone_Strips": 0,
        },
    },
]


def make_feature_set(raw_features: list[dict[str, Any]] | None = None) -> FeatureSet:
    return FeatureSet(
        fields=[FieldInfo.model_validate(f) for f in FIELDS],
        features=[Feature.model_validate(f) for f in (raw_features or RAW_FEATURES)],
    )


class FakeFeatureClient:
    """In-memory stand-in for FeatureServiceClient."""

    def __init__(self, feature_set: FeatureSet | None = None) -> None:
        self.config = ArcGISConfig()
        self.feature_set = feature_set if feature_set is not None else make_feature_set()
        self.queries: list[bool] = []
        self.added: list[NewFeature] = []
        self.add_result = AddResult(success=True, objectId=99)
        self.query_error: Exception | None = None
        self.add_error: Exception | None = None
        self.closed = False

    async def query(self, available_only: bool = False) -> FeatureSet:
        self.queries.append(available_only)
        if self.query_error is not None:
            raise self.query_error
        if not available_only:
            return self.feature_set
        field = self.config.availability_field
        return FeatureSet(
            fields=self.feature_set.fields,
            features=[f for f in self.feature_set.features if f.is_available(field)],
        )

    async def add_feature(self, feature: NewFeature) -> AddResult:
        self.added.append(feature)
        if self.add_error is not None:
            raise self.add_error
        return self.add_result

    async def is_available(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True


class FakeGeocodeClient:
    """In-memory stand-in for GeocodeClient."""

    def __init__(self, candidates: list[GeocodeCandidate] | None = None) -> None:
        self.config = ArcGISConfig()
        self.candidates = candidates if candidates is not None else [
            GeocodeCandidate(address="100 Main St, Columbia, SC 29201", location={"x": -81.03, "y": 34.00}, score=100),
        ]
        self.calls: list[str] = []
        self.error: Exception | None = None

    async def geocode(self, single_line: str) -> GeocodeCandidate | None:
        self.calls.append(single_line)
        if self.error is not None:
            raise self.error
        return self.candidates[0] if self.candidates else None

    async def close(self) -> None:
        pass


@pytest.fixture
def user_location() -> Coordinate:
    return COLUMBIA


@pytest.fixture
def feature_set() -> FeatureSet:
    return make_feature_set()


@pytest.fixture
def feature_client() -> FakeFeatureClient:
    return FakeFeatureClient()


@pytest.fixture
def geocode_client() -> FakeGeocodeClient:
    return FakeGeocodeClient()
