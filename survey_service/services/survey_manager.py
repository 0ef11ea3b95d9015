"""Survey management for survey owners.

Listing, CRUD, publishing and response browsing for surveys owned by one
user. Every lookup is scoped to the owner; a survey that exists but belongs
to someone else is reported exactly like a missing one.
"""

from typing import Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from survey_service.errors import NotActiveError, NotFoundError, ValidationError
from survey_service.models.response import Response
from survey_service.models.survey import Survey
from survey_service.models.template import Template
from survey_service.schemas.pagination import PageParams, Pagination
from survey_service.schemas.survey import SurveyCreate, SurveyStatus, SurveyUpdate
from survey_service.logging_config import get_logger

logger = get_logger(__name__)


class SurveyManager:
    """Owner-scoped survey operations."""

    def __init__(self, db: AsyncSession, user_id: int):
        """Initialize manager.

        Args:
            db: Async SQLAlchemy session
            user_id: Authenticated owner
        """
        self.db = db
        self.user_id = user_id

    async def get_owned(self, survey_id: int) -> Survey:
        """Load a survey owned by the current user.

        Raises:
            NotFoundError: If absent or owned by another user
        """
        result = await self.db.execute(
            select(Survey).where(Survey.id == survey_id, Survey.user_id == self.user_id)
        )
        survey = result.scalar_one_or_none()
        if survey is None:
            raise NotFoundError("Survey not found")
        return survey

    async def list_surveys(
        self,
        params: PageParams,
        status: Optional[SurveyStatus] = None,
        search: Optional[str] = None,
    ) -> tuple[list[Survey], Pagination]:
        """List the owner's surveys, newest first.

        Args:
            params: Page and limit
            status: Optional status filter
            search: Optional case-insensitive substring of title or description
        """
        conditions = [Survey.user_id == self.user_id]
        if status is not None:
            conditions.append(Survey.status == status.value)
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(or_(
                func.lower(Survey.title).like(pattern),
                func.lower(func.coalesce(Survey.description, "")).like(pattern),
            ))

        total = await self.db.scalar(select(func.count(Survey.id)).where(*conditions))
        result = await self.db.execute(
            select(Survey)
            .where(*conditions)
            .order_by(Survey.created_at.desc(), Survey.id.desc())
            .offset(params.offset)
            .limit(params.limit)
        )
        return list(result.scalars().all()), Pagination.build(params, total or 0)

    async def create(self, payload: SurveyCreate) -> Survey:
        """Create a draft survey with a zero response count."""
        survey = Survey(
            user_id=self.user_id,
            title=payload.title,
            description=payload.description,
            status=SurveyStatus.DRAFT.value,
            responses_count=0,
        )
        survey.set_questions(payload.questions)
        self.db.add(survey)
        await self.db.commit()
        await self.db.refresh(survey)

        logger.info(
            f"Created survey with {len(payload.questions)} questions",
            extra={"survey_id": survey.id, "user_id": self.user_id}
        )
        return survey

    async def create_from_template(self, template_id: str) -> Survey:
        """Create a draft survey copying a template's questions.

        Raises:
            NotFoundError: If the template does not exist
        """
        template = await self.db.get(Template, template_id)
        if template is None:
            raise NotFoundError("Template not found")

        survey = Survey(
            user_id=self.user_id,
            title=template.title,
            description=template.description,
            status=SurveyStatus.DRAFT.value,
            questions=list(template.questions),
            responses_count=0,
        )
        self.db.add(survey)
        await Template.increment_usage(self.db, template_id)
        await self.db.commit()
        await self.db.refresh(survey)

        logger.info(
            f"Created survey from template {template_id}",
            extra={"survey_id": survey.id, "user_id": self.user_id}
        )
        return survey

    async def update(self, survey_id: int, payload: SurveyUpdate) -> Survey:
        """Apply a partial content update.

        Raises:
            ValidationError: If questions are replaced after responses were recorded
        """
        survey = await self.get_owned(survey_id)

        # Stored answers are keyed to the current questions and options
        if payload.questions is not None and survey.responses_count > 0:
            raise ValidationError("Questions cannot be changed after responses have been recorded")

        if payload.title is not None:
            survey.title = payload.title
        if "description" in payload.model_fields_set:
            survey.description = payload.description
        if payload.questions is not None:
            survey.set_questions(payload.questions)

        await self.db.commit()
        await self.db.refresh(survey)
        return survey

    async def delete(self, survey_id: int) -> None:
        """Delete a survey together with its responses."""
        survey = await self.get_owned(survey_id)
        await self.db.execute(delete(Response).where(Response.survey_id == survey.id))
        await self.db.delete(survey)
        await self.db.commit()
        logger.info("Deleted survey", extra={"survey_id": survey_id, "user_id": self.user_id})

    async def publish(self, survey_id: int) -> Survey:
        """Open a survey for responses."""
        survey = await self.get_owned(survey_id)
        survey.publish()
        await self.db.commit()
        await self.db.refresh(survey)
        logger.info("Published survey", extra={"survey_id": survey_id, "user_id": self.user_id})
        return survey

    async def unpublish(self, survey_id: int) -> Survey:
        """Return a survey to draft; it stops accepting responses."""
        survey = await self.get_owned(survey_id)
        survey.unpublish()
        await self.db.commit()
        await self.db.refresh(survey)
        logger.info("Unpublished survey", extra={"survey_id": survey_id, "user_id": self.user_id})
        return survey

    async def list_responses(
        self,
        survey_id: int,
        params: PageParams,
    ) -> tuple[list[Response], Pagination]:
        """Page through a survey's responses, newest first, with respondents loaded."""
        survey = await self.get_owned(survey_id)

        total = await self.db.scalar(
            select(func.count(Response.id)).where(Response.survey_id == survey.id)
        )
        result = await self.db.execute(
            select(Response)
            .where(Response.survey_id == survey.id)
            .options(selectinload(Response.respondent))
            .order_by(Response.completed_at.desc(), Response.id.desc())
            .offset(params.offset)
            .limit(params.limit)
        )
        return list(result.scalars().all()), Pagination.build(params, total or 0)

    async def all_responses(self, survey_id: int) -> tuple[Survey, list[Response]]:
        """Load a survey and every response, oldest first (for export)."""
        survey = await self.get_owned(survey_id)
        result = await self.db.execute(
            select(Response)
            .where(Response.survey_id == survey.id)
            .options(selectinload(Response.respondent))
            .order_by(Response.completed_at, Response.id)
        )
        return survey, list(result.scalars().all())


async def get_public_survey(db: AsyncSession, survey_id: int) -> Survey:
    """Load a survey for respondents.

    Raises:
        NotFoundError: If the survey does not exist
        NotActiveError: If the survey is not accepting responses
    """
    survey = await db.get(Survey, survey_id)
    if survey is None:
        raise NotFoundError("Survey not found")
    if not survey.is_active:
        raise NotActiveError()
    return survey
