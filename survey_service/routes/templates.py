"""Template endpoints: browse, create, record usage, start a survey from one."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.middleware.auth import get_current_user_id
from survey_service.models.database import get_db
from survey_service.models.template import Template
from survey_service.schemas.survey import SurveyOut
from survey_service.schemas.template import TemplateDefinition, TemplateOut
from survey_service.services.survey_manager import SurveyManager
from survey_service.services.template_catalog import TemplateCatalog

router = APIRouter(prefix="/api/templates")


def _template_payload(template: Template) -> dict:
    return TemplateOut.model_validate(template).model_dump(by_alias=True, mode="json")


@router.get("")
async def list_templates(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    templates = await TemplateCatalog(db).list_templates()
    return {"data": [_template_payload(t) for t in templates]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: TemplateDefinition,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    template = await TemplateCatalog(db).create(payload, user_id)
    return {"data": _template_payload(template)}


@router.post("/{template_id}/use")
async def use_template(
    template_id: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    template = await TemplateCatalog(db).use(template_id)
    return {"data": _template_payload(template)}


@router.post("/{template_id}/surveys", status_code=status.HTTP_201_CREATED)
async def create_survey_from_template(
    template_id: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Create a draft survey with the template's title and questions."""
    survey = await SurveyManager(db, user_id).create_from_template(template_id)
    return {
        "success": True,
        "data": SurveyOut.model_validate(survey).model_dump(by_alias=True, mode="json"),
    }
