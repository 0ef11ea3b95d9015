"""General submission endpoint that takes the survey id in the request body."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.errors import ValidationError
from survey_service.models.database import get_db
from survey_service.routes.dependencies import request_metadata
from survey_service.schemas.response import GeneralSubmissionRequest
from survey_service.services.response_recorder import ResponseRecorder
from survey_service.services.validation import GENERAL

router = APIRouter(prefix="/api/responses")


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_general_response(
    request: Request,
    payload: Optional[GeneralSubmissionRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Record a submission for the survey named by `surveyId`.

    Ratings are accepted in [0, 5] here, and numeric strings are accepted
    for rating and NPS questions.
    """
    if payload is None or payload.survey_id is None or payload.answers is None:
        raise ValidationError("Survey ID and answers are required")

    recorded = await ResponseRecorder(db).record(
        payload.survey_id,
        payload.respondent,
        payload.answers,
        metadata=request_metadata(request),
        profile=GENERAL,
    )
    return {
        "success": True,
        "message": "Response submitted successfully",
        "response_id": recorded.response_id,
    }
