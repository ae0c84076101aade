"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class ArcGISConfig(BaseSettings):
    """ArcGIS REST service configuration."""

    model_config = {"env_prefix": "LOCATOR_ARCGIS_"}

    feature_service_url: str = (
        "https://services6.arcgis.com/2H5E7Y0F3MHolxq0/arcgis/rest/services/"
        "Addiction_Centers/FeatureServer/0"
    )
    geocode_url: str = (
        "https://geocode.arcgis.com/arcgis/rest/services/World/GeocodeServer"
    )
    api_key: str | None = None
    timeout_seconds: int = 30
    max_retries: int = 1
    availability_field: str = "Naloxone_Strips"
    display_field: str = "name"


class MapConfig(BaseSettings):
    """Map view and rendering configuration."""

    model_config = {"env_prefix": "LOCATOR_MAP_"}

    # Columbia, SC
    default_longitude: float = -81.0348
    default_latitude: float = 34.0007
    zoom: int = 10
    added_zoom: int = 15
    tiles: str = "OpenStreetMap"
    working_wkid: int = 3857
    directions_url: str = "https://www.google.com/maps/dir/"
    placeholder: str = "N/A"
    default_title: str = "Addiction Center"


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "LOCATOR_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8080

    arcgis: ArcGISConfig = Field(default_factory=ArcGISConfig)
    map: MapConfig = Field(default_factory=MapConfig)
