"""Models for the add-location form and its submission outcome."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from recovery_locator.core.types import Coordinate

REQUIRED_FIELDS: tuple[str, ...] = (
    "street_number",
    "street_name",
    "state",
    "zip_code",
    "name",
)


class SubmissionState(str, Enum):
    """States of the submission flow. Only IDLE accepts a submit."""

    IDLE = "idle"
    GEOCODING = "geocoding"
    SUBMITTING = "submitting"


class SubmissionStatus(str, Enum):
    """How a submit attempt ended."""

    ADDED = "added"
    ADDRESS_NOT_FOUND = "address_not_found"
    FAILED = "failed"
    INVALID = "invalid"
    IGNORED = "ignored"


class FormDraft(BaseModel):
    """Transient user input for a new location."""

    street_number: str = ""
    street_name: str = ""
    state: str = ""
    zip_code: str = ""
    name: str = ""
    naloxone_strips: int = Field(default=0, ge=0, le=1)

    def missing_fields(self) -> list[str]:
        return [f for f in REQUIRED_FIELDS if not getattr(self, f).strip()]

    @property
    def address(self) -> str:
        """Single-line address sent to the geocoder."""
        return f"{self.street_number} {self.street_name}, {self.state} {self.zip_code}"


class SubmissionOutcome(BaseModel):
    """Result of one submit attempt, with the user-facing message."""

    status: SubmissionStatus
    message: str
    coordinate: Coordinate | None = None
    object_id: int | None = None
    missing_fields: list[str] = Field(default_factory=list)
    refreshed: bool = False
