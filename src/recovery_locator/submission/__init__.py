"""Add-location form and its geocode/submit flow."""

from recovery_locator.submission.flow import LocationSubmissionFlow
from recovery_locator.submission.models import (
    FormDraft,
    SubmissionOutcome,
    SubmissionState,
    SubmissionStatus,
)

__all__ = [
    "FormDraft",
    "LocationSubmissionFlow",
    "SubmissionOutcome",
    "SubmissionState",
    "SubmissionStatus",
]
