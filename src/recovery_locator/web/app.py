"""FastAPI application for the Recovery Resource Locator.

Serves the locator page and the REST API that drives map views and
location submissions.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from recovery_locator import __version__
from recovery_locator.arcgis.features import FeatureServiceClient
from recovery_locator.arcgis.geocode import GeocodeClient
from recovery_locator.core.config import Settings
from recovery_locator.view.controller import LocatorController
from recovery_locator.web.locator_router import router as locator_router
from recovery_locator.web.submission_router import router as submission_router

_WEB_DIR = Path(__file__).parent
_TEMPLATES_DIR = _WEB_DIR / "templates"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = __version__


# --- Application factory ---


def create_app(
    settings: Settings | None = None,
    feature_client: FeatureServiceClient | None = None,
    geocode_client: GeocodeClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with fake ArcGIS clients.

    Args:
        settings: Application settings. Defaults to Settings().
        feature_client: Optional pre-built feature service client.
        geocode_client: Optional pre-built geocoding client.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    if feature_client is None:
        feature_client = FeatureServiceClient(settings.arcgis)
    if geocode_client is None:
        geocode_client = GeocodeClient(settings.arcgis)

    controller = LocatorController(
        features=feature_client,
        geocoder=geocode_client,
        settings=settings,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await controller.close()

    app = FastAPI(
        title="Recovery Resource Locator",
        description="Find the nearest recovery and harm-reduction center",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state for access in route handlers
    app.state.settings = settings
    app.state.controller = controller
    app.state.feature_client = feature_client
    app.state.geocode_client = geocode_client

    app.include_router(locator_router)
    app.include_router(submission_router)

    templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))

    # --- Routes ---

    @app.get("/", response_class=HTMLResponse)
    async def serve_locator_ui(request: Request) -> HTMLResponse:
        """Serve the locator page."""
        return templates.TemplateResponse(
            request,
            "index.html",
            {"availability_field": settings.arcgis.availability_field},
        )

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", service="recovery-locator")

    return app
