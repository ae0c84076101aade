"""Client for the ArcGIS World geocoding service."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from recovery_locator.arcgis.base import ArcGISClient, ArcGISError
from recovery_locator.arcgis.models import GeocodeCandidate
from recovery_locator.core.config import ArcGISConfig

logger = logging.getLogger(__name__)


class GeocodeClient(ArcGISClient):
    """Resolves free-form addresses to coordinates."""

    def __init__(self, config: ArcGISConfig, http: httpx.AsyncClient | None = None) -> None:
        super().__init__(config, config.geocode_url, http=http)

    async def find_candidates(self, single_line: str) -> list[GeocodeCandidate]:
        """Return address candidates, best-ranked first. May be empty."""
        params = self._params(SingleLine=single_line, outFields="*")
        data = await self._request_json("GET", "/findAddressCandidates", params=params)
        try:
            candidates = [GeocodeCandidate.model_validate(c) for c in data.get("candidates") or []]
        except ValidationError as exc:
            raise ArcGISError(f"Malformed geocode candidate: {exc}") from exc
        logger.debug("Geocoded %r to %d candidates", single_line, len(candidates))
        return candidates

    async def geocode(self, single_line: str) -> GeocodeCandidate | None:
        """Return the top-ranked candidate, or None when nothing matched."""
        candidates = await self.find_candidates(single_line)
        return candidates[0] if candidates else None
