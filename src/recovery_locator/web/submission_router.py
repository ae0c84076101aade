"""FastAPI router for the add-location form."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from recovery_locator.submission.flow import LocationSubmissionFlow
from recovery_locator.submission.models import (
    FormDraft,
    SubmissionOutcome,
    SubmissionState,
    SubmissionStatus,
)

router = APIRouter()


class FormStateResponse(BaseModel):
    form: FormDraft
    state: SubmissionState
    busy: bool


class SubmissionResponse(BaseModel):
    outcome: SubmissionOutcome
    form: FormDraft
    state: SubmissionState


def _get_flow(request: Request, view_id: str) -> LocationSubmissionFlow:
    session = request.app.state.controller.sessions.get(view_id)
    if session is None or session.submission is None:
        raise HTTPException(status_code=404, detail=f"View {view_id!r} not found")
    return session.submission


@router.get("/api/views/{view_id}/form")
async def get_form(view_id: str, request: Request) -> FormStateResponse:
    """Current form draft and submission state (submit is disabled unless idle)."""
    flow = _get_flow(request, view_id)
    return FormStateResponse(form=flow.form, state=flow.state, busy=flow.busy)


@router.post("/api/views/{view_id}/locations")
async def submit_location(view_id: str, body: FormDraft, request: Request) -> SubmissionResponse:
    """Geocode the submitted address and add it to the feature service."""
    flow = _get_flow(request, view_id)
    outcome = await flow.submit(body)

    if outcome.status == SubmissionStatus.IGNORED:
        raise HTTPException(status_code=409, detail=outcome.message)
    if outcome.status == SubmissionStatus.INVALID:
        raise HTTPException(
            status_code=422,
            detail={"message": outcome.message, "missing_fields": outcome.missing_fields},
        )

    return SubmissionResponse(outcome=outcome, form=flow.form, state=flow.state)
