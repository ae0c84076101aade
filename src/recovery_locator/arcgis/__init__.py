"""ArcGIS REST clients for geocoding and the recovery-center feature service."""

from recovery_locator.arcgis.base import ArcGISClient, ArcGISError
from recovery_locator.arcgis.features import FeatureServiceClient
from recovery_locator.arcgis.geocode import GeocodeClient

__all__ = ["ArcGISClient", "ArcGISError", "FeatureServiceClient", "GeocodeClient"]
