"""Survey endpoints.

Owner endpoints (CRUD, publishing, response listing, export, analytics)
require a bearer token. The public endpoints let respondents read an active
survey and submit answers without authentication.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status
from fastapi.responses import Response as HTTPResponse
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.middleware.auth import get_current_user_id
from survey_service.models.database import get_db
from survey_service.models.survey import Survey
from survey_service.routes.dependencies import page_params, request_metadata
from survey_service.schemas.pagination import PageParams
from survey_service.schemas.response import ResponseOut, SubmissionRequest
from survey_service.schemas.survey import (
    PublicSurveyOut,
    SurveyCreate,
    SurveyOut,
    SurveyStatus,
    SurveyUpdate,
)
from survey_service.services.analytics import AnalyticsService
from survey_service.services.csv_export import export_filename, render_csv
from survey_service.services.response_recorder import ResponseRecorder
from survey_service.services.survey_manager import SurveyManager, get_public_survey
from survey_service.services.validation import SURVEY_SCOPED
from survey_service.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/surveys")


def _survey_payload(survey: Survey) -> dict:
    return SurveyOut.model_validate(survey).model_dump(by_alias=True, mode="json")


# Owner endpoints

@router.get("")
async def list_surveys(
    status_filter: Optional[SurveyStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    surveys, pagination = await SurveyManager(db, user_id).list_surveys(
        params, status=status_filter, search=search
    )
    return {
        "success": True,
        "data": {
            "surveys": [_survey_payload(s) for s in surveys],
            "pagination": pagination.model_dump(by_alias=True),
        },
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_survey(
    payload: SurveyCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    survey = await SurveyManager(db, user_id).create(payload)
    return {"success": True, "data": _survey_payload(survey)}


@router.get("/{survey_id}")
async def get_survey(
    survey_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    survey = await SurveyManager(db, user_id).get_owned(survey_id)
    return {"success": True, "data": _survey_payload(survey)}


@router.put("/{survey_id}")
async def update_survey(
    survey_id: int,
    payload: SurveyUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    survey = await SurveyManager(db, user_id).update(survey_id, payload)
    return {"success": True, "data": _survey_payload(survey)}


@router.delete("/{survey_id}")
async def delete_survey(
    survey_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    await SurveyManager(db, user_id).delete(survey_id)
    return {"success": True, "message": "Survey deleted successfully"}


@router.put("/{survey_id}/publish")
async def publish_survey(
    survey_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    survey = await SurveyManager(db, user_id).publish(survey_id)
    return {"success": True, "data": _survey_payload(survey)}


@router.put("/{survey_id}/unpublish")
async def unpublish_survey(
    survey_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    survey = await SurveyManager(db, user_id).unpublish(survey_id)
    return {"success": True, "data": _survey_payload(survey)}


@router.get("/{survey_id}/responses")
async def list_responses(
    survey_id: int,
    params: PageParams = Depends(page_params),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    responses, pagination = await SurveyManager(db, user_id).list_responses(survey_id, params)
    return {
        "success": True,
        "data": {
            "responses": [
                ResponseOut.model_validate(r).model_dump(by_alias=True, mode="json")
                for r in responses
            ],
            "pagination": pagination.model_dump(by_alias=True),
        },
    }


@router.get("/{survey_id}/responses/export")
async def export_responses(
    survey_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> HTTPResponse:
    """Download all responses as CSV."""
    survey, responses = await SurveyManager(db, user_id).all_responses(survey_id)
    body = render_csv(survey.question_list(), responses)

    logger.info(
        f"Exported {len(responses)} responses",
        extra={"survey_id": survey_id, "user_id": user_id}
    )
    return HTTPResponse(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(survey_id)}"'},
    )


@router.get("/{survey_id}/analytics")
async def survey_analytics(
    survey_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    analytics = await AnalyticsService(db).get_analytics(survey_id, user_id)
    return {"success": True, "data": analytics.to_api()}


# Respondent-facing endpoints

@router.get("/{survey_id}/public")
async def get_public_survey_view(survey_id: int, db: AsyncSession = Depends(get_db)) -> dict:
    survey = await get_public_survey(db, survey_id)
    return {
        "success": True,
        "data": PublicSurveyOut.model_validate(survey).model_dump(mode="json"),
    }


async def _submit(
    survey_id: int,
    payload: Optional[SubmissionRequest],
    request: Request,
    db: AsyncSession,
) -> dict:
    payload = payload or SubmissionRequest()
    recorded = await ResponseRecorder(db).record(
        survey_id,
        payload.respondent,
        payload.answers,
        metadata=request_metadata(request),
        profile=SURVEY_SCOPED,
    )
    return {
        "success": True,
        "message": "Response submitted successfully",
        "response_id": recorded.response_id,
    }


@router.post("/{survey_id}/public", status_code=status.HTTP_201_CREATED)
async def submit_public_response(
    survey_id: int,
    request: Request,
    payload: Optional[SubmissionRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _submit(survey_id, payload, request, db)


@router.post("/{survey_id}/responses", status_code=status.HTTP_201_CREATED)
async def submit_response(
    survey_id: int,
    request: Request,
    payload: Optional[SubmissionRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _submit(survey_id, payload, request, db)
