"""Pydantic schemas for survey create/update payloads and API output."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from survey_service.schemas.question import Question, ensure_unique_ids


class SurveyStatus(str, Enum):
    """Survey lifecycle states."""
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class SurveyCreate(BaseModel):
    """Payload for creating a survey.

    New surveys always start in draft with a zero response count; clients
    cannot set either.
    """
    title: str = Field(..., min_length=1, description="Survey title")
    description: Optional[str] = Field(None, description="Survey description")
    questions: list[Question] = Field(..., min_length=1, description="Ordered questions")

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v):
        """Strip the title and reject whitespace-only values."""
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator('questions')
    @classmethod
    def unique_question_ids(cls, v):
        return ensure_unique_ids(v)


class SurveyUpdate(BaseModel):
    """Partial update of a survey's content. Status changes go through publish/unpublish."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    questions: Optional[list[Question]] = Field(None, min_length=1)

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v):
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Title is required")
        return v

    @field_validator('questions')
    @classmethod
    def unique_question_ids(cls, v):
        if v is not None:
            ensure_unique_ids(v)
        return v


class SurveyOut(BaseModel):
    """Survey as returned to its owner."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    description: Optional[str] = None
    status: SurveyStatus
    questions: list[Question]
    responses_count: int = Field(serialization_alias="responsesCount")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")
    published_at: Optional[datetime] = Field(None, serialization_alias="publishedAt")


class PublicSurveyOut(BaseModel):
    """Survey as shown to respondents (no owner or counters)."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    questions: list[Question]
