"""Pydantic request models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class BulkTextRequest(BaseModel):
    """Pasted multi-line text, one event per line."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    clip_to_operating_year: bool = Field(True, alias="clipToOperatingYear")


class NaturalTextRequest(BaseModel):
    """Single free-text sentence."""

    text: str


class EventPayload(BaseModel):
    """
    Event fields for create and update.

    All optional so the same model serves partial updates; required fields
    are enforced by core.validation.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    type: str | None = None
    date: str | None = None
    end_date: str | None = Field(None, alias="endDate")
    start_time: str | None = Field(None, alias="startTime")
    end_time: str | None = Field(None, alias="endTime")
    notes: str | None = None

    def to_event_data(self) -> dict:
        """camelCase dict of the fields that were actually sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)
