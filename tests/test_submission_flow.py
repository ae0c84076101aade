"""Tests for the geocode-then-add location submission flow."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from recovery_locator.arcgis.base import ArcGISError
from recovery_locator.arcgis.models import AddResult
from recovery_locator.mapview.models import MarkerKind
from recovery_locator.mapview.presenter import MapPresenter
from recovery_locator.submission.flow import (
    ADDED_MESSAGE,
    FAILED_MESSAGE,
    NOT_FOUND_MESSAGE,
    LocationSubmissionFlow,
)
from recovery_locator.submission.models import (
    FormDraft,
    SubmissionState,
    SubmissionStatus,
)


class RefreshCounter:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1


def _draft(**overrides) -> FormDraft:
    data = {
        "street_number": "100",
        "street_name": "Main St",
        "state": "SC",
        "zip_code": "29201",
        "name": "Test Clinic",
        "naloxone_strips": 1,
    }
    data.update(overrides)
    return FormDraft(**data)


@pytest.fixture
def refresh() -> RefreshCounter:
    return RefreshCounter()


@pytest.fixture
def presenter(user_location) -> MapPresenter:
    return MapPresenter(center=user_location)


@pytest.fixture
def flow(geocode_client, feature_client, presenter, refresh) -> LocationSubmissionFlow:
    return LocationSubmissionFlow(
        geocoder=geocode_client,
        features=feature_client,
        presenter=presenter,
        on_feature_added=refresh,
    )


class TestFormDraft:
    def test_address_string(self):
        assert _draft().address == "100 Main St, SC 29201"

    def test_missing_fields(self):
        assert _draft(name="", state="  ").missing_fields() == ["state", "name"]

    def test_defaults_are_empty(self):
        draft = FormDraft()
        assert draft.street_number == ""
        assert draft.naloxone_strips == 0


class TestSuccessfulSubmission:
    @pytest.mark.asyncio
    async def test_geocodes_full_address(self, flow, geocode_client):
        await flow.submit(_draft())
        assert geocode_client.calls == ["100 Main St, SC 29201"]

    @pytest.mark.asyncio
    async def test_posts_top_candidate(self, flow, feature_client):
        await flow.submit(_draft())
        assert len(feature_client.added) == 1
        payload = feature_client.added[0].to_wire()
        assert payload == {
            "attributes": {"name": "Test Clinic", "Naloxone_Strips": 1},
            "geometry": {"x": -81.03, "y": 34.0, "spatialReference": {"wkid": 4326}},
        }

    @pytest.mark.asyncio
    async def test_resets_form_and_refreshes_once(self, flow, refresh):
        outcome = await flow.submit(_draft())
        assert outcome.status == SubmissionStatus.ADDED
        assert outcome.message == ADDED_MESSAGE
        assert outcome.object_id == 99
        assert outcome.refreshed is True
        assert flow.form == FormDraft()
        assert refresh.calls == 1
        assert flow.state == SubmissionState.IDLE

    @pytest.mark.asyncio
    async def test_draws_added_marker(self, flow, presenter):
        await flow.submit(_draft())
        added = presenter.view.markers_of(MarkerKind.ADDED)
        assert len(added) == 1
        assert added[0].coordinate.longitude == -81.03
        assert presenter.view.center == added[0].coordinate

    @pytest.mark.asyncio
    async def test_added_marker_survives_refresh(self, flow, presenter, user_location, feature_set):
        async def rebuild_markers() -> None:
            presenter.replace_features(user_location, feature_set, nearest_index=0)

        flow._on_feature_added = rebuild_markers
        await flow.submit(_draft())

        added = presenter.view.markers_of(MarkerKind.ADDED)
        assert len(added) == 1
        assert added[0].popup.title == "Test Clinic"
        assert len(presenter.view.markers) == 6
        assert presenter.view.zoom == 15

    @pytest.mark.asyncio
    async def test_failed_refresh_still_reports_added(self, flow):
        async def broken_refresh() -> None:
            raise httpx.ConnectError("down")

        flow._on_feature_added = broken_refresh
        outcome = await flow.submit(_draft())
        assert outcome.status == SubmissionStatus.ADDED
        assert outcome.refreshed is False


class TestAddressNotFound:
    @pytest.mark.asyncio
    async def test_no_candidates(self, flow, geocode_client, feature_client, presenter, refresh):
        geocode_client.candidates = []
        draft = _draft()
        outcome = await flow.submit(draft)

        assert outcome.status == SubmissionStatus.ADDRESS_NOT_FOUND
        assert outcome.message == NOT_FOUND_MESSAGE
        assert feature_client.added == []
        assert presenter.view.markers == []
        assert refresh.calls == 0
        assert flow.form == draft
        assert flow.state == SubmissionState.IDLE


class TestFailedSubmission:
    @pytest.mark.asyncio
    async def test_service_reported_failure(self, flow, feature_client, presenter, refresh):
        feature_client.add_result = AddResult(success=False)
        draft = _draft()
        outcome = await flow.submit(draft)

        assert outcome.status == SubmissionStatus.FAILED
        assert outcome.message == FAILED_MESSAGE
        assert flow.form == draft
        assert refresh.calls == 0
        assert presenter.view.markers == []

    @pytest.mark.asyncio
    async def test_network_error(self, flow, feature_client, refresh):
        feature_client.add_error = httpx.ConnectError("connection refused")
        outcome = await flow.submit(_draft())
        assert outcome.status == SubmissionStatus.FAILED
        assert flow.form == _draft()
        assert refresh.calls == 0

    @pytest.mark.asyncio
    async def test_service_error_envelope(self, flow, feature_client):
        feature_client.add_error = ArcGISError("Unable to complete operation", code=500)
        outcome = await flow.submit(_draft())
        assert outcome.status == SubmissionStatus.FAILED

    @pytest.mark.asyncio
    async def test_geocoder_error(self, flow, geocode_client, feature_client):
        geocode_client.error = httpx.ReadTimeout("timed out")
        outcome = await flow.submit(_draft())
        assert outcome.status == SubmissionStatus.FAILED
        assert feature_client.added == []

    @pytest.mark.asyncio
    async def test_retry_after_failure_succeeds(self, flow, feature_client, refresh):
        feature_client.add_result = AddResult(success=False)
        await flow.submit(_draft())
        feature_client.add_result = AddResult(success=True)
        outcome = await flow.submit()
        assert outcome.status == SubmissionStatus.ADDED
        assert refresh.calls == 1


class TestStateMachine:
    @pytest.mark.asyncio
    async def test_missing_required_field(self, flow, geocode_client):
        outcome = await flow.submit(_draft(zip_code=""))
        assert outcome.status == SubmissionStatus.INVALID
        assert outcome.missing_fields == ["zip_code"]
        assert geocode_client.calls == []

    @pytest.mark.asyncio
    async def test_submit_ignored_while_busy(self, geocode_client, feature_client):
        release = asyncio.Event()
        seen_states: list[SubmissionState] = []

        class SlowGeocoder:
            config = geocode_client.config

            async def geocode(self, single_line):
                seen_states.append(flow.state)
                await release.wait()
                return await geocode_client.geocode(single_line)

        flow = LocationSubmissionFlow(geocoder=SlowGeocoder(), features=feature_client)
        first = asyncio.create_task(flow.submit(_draft()))
        await asyncio.sleep(0)

        assert flow.busy
        second = await flow.submit(_draft(name="Other"))
        assert second.status == SubmissionStatus.IGNORED

        release.set()
        outcome = await first
        assert outcome.status == SubmissionStatus.ADDED
        assert seen_states == [SubmissionState.GEOCODING]
        assert len(feature_client.added) == 1
        assert flow.state == SubmissionState.IDLE
