"""Respondent listing endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.middleware.auth import get_current_user_id
from survey_service.models.database import get_db
from survey_service.routes.dependencies import page_params
from survey_service.schemas.pagination import PageParams
from survey_service.services.respondent_directory import RespondentDirectory

router = APIRouter(prefix="/api/respondents")


@router.get("")
async def list_respondents(
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    respondents, pagination = await RespondentDirectory(db, user_id).list_respondents(
        params, search=search
    )
    return {
        "success": True,
        "data": {
            "respondents": [r.model_dump(by_alias=True, mode="json") for r in respondents],
            "pagination": pagination.model_dump(by_alias=True),
        },
    }
