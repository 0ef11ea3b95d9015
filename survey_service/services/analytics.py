"""Analytics aggregation over stored survey responses.

Produces per-question distributions and statistics plus a daily submission
timeline for one survey. The aggregation itself is a pure function over
already-loaded responses; `AnalyticsService` handles loading and ownership.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.errors import NotFoundError
from survey_service.models.response import Response
from survey_service.models.survey import Survey
from survey_service.schemas.question import Question, QuestionType
from survey_service.services.validation import as_number, is_empty_answer
from survey_service.logging_config import get_logger

logger = get_logger(__name__)


class QuestionAnalytics(BaseModel):
    """Rollup for a single question.

    `option_distribution` is present for choice questions; `average`, `min`
    and `max` for rating/NPS questions with at least one numeric answer.
    """
    question_id: str = Field(serialization_alias="questionId")
    question: str
    type: QuestionType
    total_responses: int = Field(serialization_alias="totalResponses")
    option_distribution: Optional[dict[str, int]] = Field(None, serialization_alias="optionDistribution")
    average: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None


class TimelinePoint(BaseModel):
    date: str
    count: int


class SurveyAnalytics(BaseModel):
    survey_id: int = Field(serialization_alias="surveyId")
    total_responses: int = Field(serialization_alias="totalResponses")
    completion_rate: int = Field(serialization_alias="completionRate")
    question_analytics: list[QuestionAnalytics] = Field(serialization_alias="questionAnalytics")
    timeline: list[TimelinePoint]

    def to_api(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping statistics that do not apply."""
        data = self.model_dump(by_alias=True, mode="json")
        data["questionAnalytics"] = [
            {k: v for k, v in item.items() if v is not None}
            for item in data["questionAnalytics"]
        ]
        return data


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are always UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def summarize_question(question: Question, answers: list[Any]) -> QuestionAnalytics:
    """Build the rollup for one question from its answers across responses.

    Args:
        question: Question definition
        answers: This question's answer from each response (None if unanswered)
    """
    present = [a for a in answers if not is_empty_answer(a)]
    summary = QuestionAnalytics(
        question_id=question.id,
        question=question.question,
        type=question.type,
        total_responses=len(present),
    )

    if question.is_choice:
        if question.type == QuestionType.SINGLE_CHOICE:
            counts = Counter(a for a in present if isinstance(a, str))
        else:
            counts = Counter(
                opt for opt in question.options for a in present if isinstance(a, list) and opt in a
            )
        summary.option_distribution = {opt: counts.get(opt, 0) for opt in question.options}

    elif question.is_numeric:
        values = [v for v in (as_number(a) for a in present) if v is not None]
        if values:
            summary.average = sum(values) / len(values)
            summary.min = min(values)
            summary.max = max(values)

    return summary


def build_timeline(completed: Iterable[datetime]) -> list[TimelinePoint]:
    """Count submissions per UTC calendar day, oldest day first."""
    per_day = Counter(_as_utc(moment).strftime("%Y-%m-%d") for moment in completed)
    return [TimelinePoint(date=day, count=per_day[day]) for day in sorted(per_day)]


def aggregate(survey_id: int, questions: list[Question], responses: list[Response]) -> SurveyAnalytics:
    """Aggregate responses into survey analytics.

    Args:
        survey_id: Survey the responses belong to
        questions: Survey questions in declared order
        responses: All stored responses for the survey

    Returns:
        SurveyAnalytics
    """
    total = len(responses)

    return SurveyAnalytics(
        survey_id=survey_id,
        total_responses=total,
        # Binary signal only; abandoned submissions are not tracked
        completion_rate=100 if total > 0 else 0,
        question_analytics=[
            summarize_question(q, [r.answers.get(q.id) for r in responses])
            for q in questions
        ],
        timeline=build_timeline(r.completed_at for r in responses),
    )


class AnalyticsService:
    """Loads an owned survey and its responses and aggregates them."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_analytics(self, survey_id: int, user_id: int) -> SurveyAnalytics:
        """Compute analytics for a survey owned by `user_id`.

        Raises:
            NotFoundError: If the survey is absent or owned by someone else
        """
        result = await self.db.execute(
            select(Survey).where(Survey.id == survey_id, Survey.user_id == user_id)
        )
        survey = result.scalar_one_or_none()
        if survey is None:
            raise NotFoundError("Survey not found")

        result = await self.db.execute(
            select(Response)
            .where(Response.survey_id == survey_id)
            .order_by(Response.completed_at)
        )
        responses = list(result.scalars().all())

        logger.debug(
            f"Aggregating {len(responses)} responses",
            extra={"survey_id": survey_id, "user_id": user_id}
        )
        return aggregate(survey.id, survey.question_list(), responses)
