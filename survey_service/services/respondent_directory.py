"""Respondent listing for survey owners.

Only respondents who answered at least one of the caller's surveys are
visible, with their activity counted over those surveys alone.
"""

from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.models.respondent import Respondent
from survey_service.models.response import Response
from survey_service.models.survey import Survey
from survey_service.schemas.pagination import PageParams, Pagination
from survey_service.schemas.response import RespondentOut


class RespondentDirectory:

    def __init__(self, db: AsyncSession, user_id: int):
        self.db = db
        self.user_id = user_id

    async def list_respondents(
        self,
        params: PageParams,
        search: Optional[str] = None,
    ) -> tuple[list[RespondentOut], Pagination]:
        """List respondents, most recently updated first.

        Args:
            params: Page and limit
            search: Optional case-insensitive substring of name or email
        """
        activity = (
            select(
                Response.respondent_id.label("respondent_id"),
                func.count(Response.id).label("surveys"),
                func.max(Response.completed_at).label("last_active"),
            )
            .join(Survey, Survey.id == Response.survey_id)
            .where(Survey.user_id == self.user_id)
            .group_by(Response.respondent_id)
            .subquery()
        )

        conditions = []
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(or_(
                func.lower(func.coalesce(Respondent.name, "")).like(pattern),
                func.lower(func.coalesce(Respondent.email, "")).like(pattern),
            ))

        total = await self.db.scalar(
            select(func.count(Respondent.id))
            .join(activity, activity.c.respondent_id == Respondent.id)
            .where(*conditions)
        )
        rows = await self.db.execute(
            select(Respondent, activity.c.surveys, activity.c.last_active)
            .join(activity, activity.c.respondent_id == Respondent.id)
            .where(*conditions)
            .order_by(Respondent.updated_at.desc(), Respondent.id.desc())
            .offset(params.offset)
            .limit(params.limit)
        )

        respondents = [
            RespondentOut(
                id=respondent.id,
                email=respondent.email,
                name=respondent.name,
                surveys=surveys,
                last_active=last_active or respondent.updated_at,
                metadata=respondent.metadata_ or {},
                created_at=respondent.created_at,
                updated_at=respondent.updated_at,
            )
            for respondent, surveys, last_active in rows.all()
        ]
        return respondents, Pagination.build(params, total or 0)
