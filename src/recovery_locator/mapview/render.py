"""Rendering of a MapView to standalone Leaflet HTML with folium."""

from __future__ import annotations

import html

import folium

from recovery_locator.mapview.models import MapView, Popup


def popup_html(popup: Popup) -> str:
    rows = "".join(
        f"<tr><th>{html.escape(row.label)}</th><td>{html.escape(row.value)}</td></tr>"
        for row in popup.rows
    )
    return f"<h4>{html.escape(popup.title)}</h4><table>{rows}</table>"


def build_map(view: MapView, tiles: str = "OpenStreetMap") -> folium.Map:
    """Build a folium map for *view*, with the open popup shown."""
    fmap = folium.Map(
        location=[view.center.latitude, view.center.longitude],
        zoom_start=view.zoom,
        tiles=tiles,
    )
    for marker in view.markers:
        popup = None
        tooltip = None
        if marker.popup is not None:
            popup = folium.Popup(
                popup_html(marker.popup),
                max_width=320,
                show=marker.marker_id == view.open_popup,
            )
            tooltip = marker.popup.title
        folium.CircleMarker(
            location=[marker.coordinate.latitude, marker.coordinate.longitude],
            radius=marker.size / 2,
            color=marker.color,
            fill=True,
            fill_color=marker.color,
            fill_opacity=0.9,
            popup=popup,
            tooltip=tooltip,
        ).add_to(fmap)
    return fmap


def render_html(view: MapView, tiles: str = "OpenStreetMap") -> str:
    return build_map(view, tiles).get_root().render()
