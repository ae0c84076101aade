"""FastAPI router for map views: open, query cycles, map HTML, directions."""

from __future__ import annotations

from typing import Any

import httpx
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel

from recovery_locator.arcgis.base import ArcGISError
from recovery_locator.arcgis.health import check_feature_service_health
from recovery_locator.core.types import Coordinate, HealthStatus
from recovery_locator.geo.location import ReportedLocationProvider
from recovery_locator.mapview.models import MapView
from recovery_locator.view.controller import LocatorController, NearestNotFoundError
from recovery_locator.view.session import ViewSession

router = APIRouter()


# --- Request/Response models ---


class OpenViewRequest(BaseModel):
    """What the browser learned from its Geolocation API."""

    supported: bool = True
    longitude: float | None = None
    latitude: float | None = None
    error: str | None = None


class FilterRequest(BaseModel):
    available_only: bool


class ViewStateResponse(BaseModel):
    view_id: str
    user_location: Coordinate
    used_fallback: bool
    notice: str | None = None
    available_only: bool
    loading: bool
    feature_count: int
    nearest: dict[str, Any] | None = None
    view: MapView
    error: str | None = None


# --- Helpers ---


def _controller(request: Request) -> LocatorController:
    return request.app.state.controller


def _get_session(request: Request, view_id: str) -> ViewSession:
    session = _controller(request).sessions.get(view_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"View {view_id!r} not found")
    return session


def _view_state(session: ViewSession, error: str | None = None) -> ViewStateResponse:
    return ViewStateResponse(
        view_id=session.view_id,
        user_location=session.user_location,
        used_fallback=session.location.used_fallback,
        notice=session.location.notice,
        available_only=session.available_only,
        loading=session.loading,
        feature_count=len(session.feature_set) if session.feature_set else 0,
        nearest=dict(session.nearest.attributes) if session.nearest else None,
        view=session.presenter.view,
        error=error,
    )


async def _run_cycle(controller: LocatorController, session: ViewSession, available_only: bool | None = None) -> None:
    try:
        if available_only is None:
            await controller.refresh(session)
        else:
            await controller.set_filter(session, available_only)
    except (httpx.HTTPError, ArcGISError) as exc:
        raise HTTPException(
            status_code=502,
            detail=f"Feature service query failed: {exc}",
        )


# --- View endpoints ---


@router.post("/api/views", status_code=201)
async def open_view(body: OpenViewRequest, request: Request) -> ViewStateResponse:
    """Resolve the user location, open a view and run the first cycle."""
    controller = _controller(request)
    provider = None
    if body.supported:
        provider = ReportedLocationProvider(
            longitude=body.longitude,
            latitude=body.latitude,
            error=body.error,
        )
    session = await controller.open_view(provider)

    error = None
    try:
        await controller.refresh(session)
    except (httpx.HTTPError, ArcGISError) as exc:
        error = f"Feature service query failed: {exc}"
    return _view_state(session, error=error)


@router.get("/api/views/{view_id}")
async def get_view(view_id: str, request: Request) -> ViewStateResponse:
    return _view_state(_get_session(request, view_id))


@router.delete("/api/views/{view_id}", status_code=204)
async def close_view(view_id: str, request: Request) -> None:
    if not _controller(request).sessions.remove(view_id):
        raise HTTPException(status_code=404, detail=f"View {view_id!r} not found")


@router.get("/api/views/{view_id}/map", response_class=HTMLResponse)
async def view_map(view_id: str, request: Request) -> HTMLResponse:
    """Rendered Leaflet map for the view."""
    session = _get_session(request, view_id)
    return HTMLResponse(session.presenter.render_html())


@router.post("/api/views/{view_id}/filter")
async def set_filter(view_id: str, body: FilterRequest, request: Request) -> ViewStateResponse:
    """Toggle the availability filter and re-query."""
    session = _get_session(request, view_id)
    await _run_cycle(_controller(request), session, available_only=body.available_only)
    return _view_state(session)


@router.post("/api/views/{view_id}/refresh")
async def refresh_view(view_id: str, request: Request) -> ViewStateResponse:
    session = _get_session(request, view_id)
    await _run_cycle(_controller(request), session)
    return _view_state(session)


@router.get("/api/views/{view_id}/directions")
async def directions(view_id: str, request: Request) -> RedirectResponse:
    """Redirect to driving directions from the user to the nearest feature."""
    session = _get_session(request, view_id)
    try:
        url = _controller(request).directions(session)
    except NearestNotFoundError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return RedirectResponse(url, status_code=307)


# --- Health ---


@router.get("/api/health/arcgis")
async def arcgis_health(request: Request) -> HealthStatus:
    return await check_feature_service_health(request.app.state.feature_client)
