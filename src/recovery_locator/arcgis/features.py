"""Client for the recovery-center feature service (query and addFeatures)."""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError

from recovery_locator.arcgis.base import ArcGISClient, ArcGISError
from recovery_locator.arcgis.models import AddResult, Feature, FeatureSet, FieldInfo, NewFeature
from recovery_locator.core.config import ArcGISConfig
from recovery_locator.core.types import WGS84_WKID

logger = logging.getLogger(__name__)

ALL_FEATURES_WHERE = "1=1"


class FeatureServiceClient(ArcGISClient):
    """Talks to a single feature-service layer."""

    def __init__(self, config: ArcGISConfig, http: httpx.AsyncClient | None = None) -> None:
        super().__init__(config, config.feature_service_url, http=http)

    def where_clause(self, available_only: bool) -> str:
        if available_only:
            return f"{self.config.availability_field} = 1"
        return ALL_FEATURES_WHERE

    async def query(self, available_only: bool = False) -> FeatureSet:
        """Query every feature of the layer, optionally only available ones.

        No spatial restriction is applied. Errors propagate to the caller.
        """
        params = self._params(
            where=self.where_clause(available_only),
            outFields="*",
            returnGeometry="true",
            outSR=WGS84_WKID,
        )
        data = await self._request_json("GET", "/query", params=params)

        # Geometries inherit the response-level spatial reference
        layer_sr = data.get("spatialReference")
        features: list[Feature] = []
        for raw in data.get("features") or []:
            geometry = raw.get("geometry")
            if not geometry:
                logger.warning("Dropping feature without geometry: %r", raw.get("attributes"))
                continue
            if layer_sr and "spatialReference" not in geometry:
                geometry = {**geometry, "spatialReference": layer_sr}
            try:
                features.append(
                    Feature(geometry=geometry, attributes=raw.get("attributes") or {})
                )
            except ValidationError as exc:
                raise ArcGISError(f"Malformed feature in query response: {exc}") from exc

        try:
            fields = [FieldInfo.model_validate(f) for f in data.get("fields") or []]
        except ValidationError as exc:
            raise ArcGISError(f"Malformed field list in query response: {exc}") from exc
        logger.debug("Feature query (%s) returned %d features", params["where"], len(features))
        return FeatureSet(fields=fields, features=features)

    async def add_feature(self, feature: NewFeature) -> AddResult:
        """Post one new feature and return the service's result for it."""
        body = self._params(features=json.dumps([feature.to_wire()]))
        data = await self._request_json("POST", "/addFeatures", data=body)
        results = data.get("addResults") or []
        if not results:
            return AddResult(success=False)
        try:
            return AddResult.model_validate(results[0])
        except ValidationError as exc:
            raise ArcGISError(f"Malformed addFeatures result: {exc}") from exc

    async def is_available(self) -> bool:
        try:
            r = await self._http.get("", params=self._params())
            return r.status_code == 200 and "error" not in r.json()
        except (httpx.HTTPError, ValueError):
            return False
