"""Geocode-then-add flow for user-submitted locations."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

import httpx

from recovery_locator.arcgis.base import ArcGISError
from recovery_locator.arcgis.features import FeatureServiceClient
from recovery_locator.arcgis.geocode import GeocodeClient
from recovery_locator.arcgis.models import NewFeature, PointGeometry
from recovery_locator.core.config import ArcGISConfig
from recovery_locator.mapview.presenter import MapPresenter
from recovery_locator.submission.models import (
    FormDraft,
    SubmissionOutcome,
    SubmissionState,
    SubmissionStatus,
)

logger = logging.getLogger(__name__)

ADDED_MESSAGE = "Location added successfully!"
NOT_FOUND_MESSAGE = "Address not found. Please try a different one."
FAILED_MESSAGE = "Failed to submit location."
INVALID_MESSAGE = "Please fill in all required fields."
BUSY_MESSAGE = "A submission is already in progress."

RefreshCallback = Callable[[], Awaitable[None]]


class LocationSubmissionFlow:
    """State machine: IDLE -> GEOCODING -> SUBMITTING -> IDLE.

    The form draft lives here. It is reset to defaults only after a
    successful add and is otherwise kept for retry.
    """

    def __init__(
        self,
        geocoder: GeocodeClient,
        features: FeatureServiceClient,
        presenter: MapPresenter | None = None,
        on_feature_added: RefreshCallback | None = None,
        config: ArcGISConfig | None = None,
    ) -> None:
        self._geocoder = geocoder
        self._features = features
        self._presenter = presenter
        self._on_feature_added = on_feature_added
        self._config = config or features.config
        self._state = SubmissionState.IDLE
        self._form = FormDraft()

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is not SubmissionState.IDLE

    @property
    def form(self) -> FormDraft:
        return self._form

    async def submit(self, draft: FormDraft | None = None) -> SubmissionOutcome:
        """Geocode the form's address and add it as a new feature."""
        if self.busy:
            return SubmissionOutcome(status=SubmissionStatus.IGNORED, message=BUSY_MESSAGE)

        if draft is not None:
            self._form = draft
        form = self._form

        missing = form.missing_fields()
        if missing:
            return SubmissionOutcome(
                status=SubmissionStatus.INVALID,
                message=INVALID_MESSAGE,
                missing_fields=missing,
            )

        try:
            return await self._run(form)
        finally:
            self._state = SubmissionState.IDLE

    async def _run(self, form: FormDraft) -> SubmissionOutcome:
        self._state = SubmissionState.GEOCODING
        try:
            candidate = await self._geocoder.geocode(form.address)
        except (httpx.HTTPError, ArcGISError, ValueError):
            logger.exception("Geocoding failed for %r", form.address)
            return SubmissionOutcome(status=SubmissionStatus.FAILED, message=FAILED_MESSAGE)

        if candidate is None:
            logger.info("No geocode candidates for %r", form.address)
            return SubmissionOutcome(status=SubmissionStatus.ADDRESS_NOT_FOUND, message=NOT_FOUND_MESSAGE)

        self._state = SubmissionState.SUBMITTING
        coordinate = candidate.to_coordinate()
        new_feature = NewFeature(
            attributes={
                self._config.display_field: form.name,
                self._config.availability_field: form.naloxone_strips,
            },
            geometry=PointGeometry.from_coordinate(coordinate),
        )
        try:
            result = await self._features.add_feature(new_feature)
        except (httpx.HTTPError, ArcGISError, ValueError):
            logger.exception("addFeatures request failed for %r", form.name)
            return SubmissionOutcome(status=SubmissionStatus.FAILED, message=FAILED_MESSAGE)

        if not result.success:
            logger.error("Feature service rejected %r: %s", form.name, result.error)
            return SubmissionOutcome(status=SubmissionStatus.FAILED, message=FAILED_MESSAGE)

        added_marker = None
        if self._presenter is not None:
            added_marker = self._presenter.show_added_location(coordinate, form.name)
        self._form = FormDraft()

        outcome = SubmissionOutcome(
            status=SubmissionStatus.ADDED,
            message=ADDED_MESSAGE,
            coordinate=coordinate,
            object_id=result.object_id,
        )
        if self._on_feature_added is not None:
            try:
                await self._on_feature_added()
                outcome.refreshed = True
            except Exception:
                logger.exception("Refresh after adding %r failed", form.name)

        # The refresh rebuilds the marker set; the highlight stays until the next cycle
        if added_marker is not None and self._presenter.view.marker(added_marker.marker_id) is None:
            self._presenter.add_marker(added_marker)
        return outcome
