"""Health check for the configured ArcGIS feature service."""

from __future__ import annotations

import time

from recovery_locator.arcgis.features import FeatureServiceClient
from recovery_locator.core.types import HealthStatus


async def check_feature_service_health(client: FeatureServiceClient) -> HealthStatus:
    """Probe the feature service layer and return a HealthStatus."""
    try:
        start = time.monotonic()
        available = await client.is_available()
        latency_ms = (time.monotonic() - start) * 1000

        return HealthStatus(
            service="arcgis:feature_service",
            healthy=available,
            latency_ms=round(latency_ms, 2),
            details={"url": client.config.feature_service_url},
        )
    except Exception as exc:
        return HealthStatus(
            service="arcgis:feature_service",
            healthy=False,
            details={"error": str(exc)},
        )
