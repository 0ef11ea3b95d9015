"""Pydantic schemas for response submission payloads and listings."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RespondentInfo(BaseModel):
    """Identity supplied alongside a submission.

    Unknown keys are kept and stored in the respondent's metadata.

    Attributes:
        email: Optional email, used as the respondent's dedupe key
        name: Optional display name
        metadata: Free-form respondent metadata
    """
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = Field(None, description="Respondent email")
    name: Optional[str] = Field(None, description="Respondent name")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Trim and lowercase; blank emails count as no email."""
        if v is None:
            return None
        v = v.strip().lower()
        return v or None

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return None
        return v.strip() or None

    def collected_metadata(self) -> dict[str, Any]:
        """Explicit metadata merged with any extra keys sent by the client."""
        merged = dict(self.model_extra or {})
        merged.update(self.metadata)
        return merged


class SubmissionRequest(BaseModel):
    """Body of a survey-scoped submission.

    `answers` is optional at the schema level so that a missing payload is
    reported with the service's own message rather than a schema error.
    """
    respondent: Optional[RespondentInfo] = None
    answers: Optional[dict[str, Any]] = None


class GeneralSubmissionRequest(SubmissionRequest):
    """Body of a submission that names its survey in the payload."""
    model_config = ConfigDict(populate_by_name=True)

    survey_id: Optional[int] = Field(None, alias="surveyId")


class RequestMetadata(BaseModel):
    """Request details captured with every response."""
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class RespondentSummary(BaseModel):
    """Respondent fields shown next to each listed response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: Optional[str] = None
    name: Optional[str] = None


class ResponseOut(BaseModel):
    """Stored response as listed to the survey owner."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    survey_id: int = Field(serialization_alias="surveyId")
    respondent: RespondentSummary
    answers: dict[str, Any]
    completed_at: datetime = Field(serialization_alias="completedAt")


class RespondentOut(BaseModel):
    """Respondent with activity across the caller's surveys.

    Attributes:
        surveys: Number of responses submitted to the caller's surveys
        last_active: Most recent completion time of those responses
    """
    id: int
    email: Optional[str] = None
    name: Optional[str] = None
    surveys: int
    last_active: datetime = Field(serialization_alias="lastActive")
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")
