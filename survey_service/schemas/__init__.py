"""Pydantic schemas for data validation.

This package contains the Pydantic models for questions, surveys, submissions,
templates, authentication payloads and pagination.
"""

from survey_service.schemas.question import (
    QuestionType,
    Question,
    CHOICE_TYPES,
    NUMERIC_TYPES,
)
from survey_service.schemas.survey import (
    SurveyStatus,
    SurveyCreate,
    SurveyUpdate,
    SurveyOut,
    PublicSurveyOut,
)
from survey_service.schemas.response import (
    RespondentInfo,
    SubmissionRequest,
    GeneralSubmissionRequest,
    RequestMetadata,
    RespondentSummary,
    ResponseOut,
    RespondentOut,
)
from survey_service.schemas.template import TemplateType, TemplateDefinition, TemplateOut
from survey_service.schemas.auth import UserRegister, UserLogin, UserOut
from survey_service.schemas.pagination import PageParams, Pagination

__all__ = [
    "QuestionType",
    "Question",
    "CHOICE_TYPES",
    "NUMERIC_TYPES",
    "SurveyStatus",
    "SurveyCreate",
    "SurveyUpdate",
    "SurveyOut",
    "PublicSurveyOut",
    "RespondentInfo",
    "SubmissionRequest",
    "GeneralSubmissionRequest",
    "RequestMetadata",
    "RespondentSummary",
    "ResponseOut",
    "RespondentOut",
    "TemplateType",
    "TemplateDefinition",
    "TemplateOut",
    "UserRegister",
    "UserLogin",
    "UserOut",
    "PageParams",
    "Pagination",
]
