"""Response recorder for survey submissions.

This module coordinates the steps of accepting a submission: loading the
survey, validating every answer, resolving the respondent, storing the
response and bumping the survey's response counter, all in one transaction.
"""

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.errors import NotActiveError, NotFoundError, ValidationError
from survey_service.models.respondent import Respondent
from survey_service.models.response import Response
from survey_service.models.survey import Survey
from survey_service.models.user import utcnow
from survey_service.schemas.response import RequestMetadata, RespondentInfo
from survey_service.services.validation import (
    AnswerValidator,
    SubmissionProfile,
    SURVEY_SCOPED,
)
from survey_service.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class RecordedResponse:
    """Identifiers of a stored response."""
    response_id: int
    respondent_id: int


class ResponseRecorder:
    """Service that turns a validated submission into a stored response.

    Nothing is written unless every answer passes validation; once writing
    starts, the respondent, the response and the counter increment commit
    together or not at all.
    """

    def __init__(self, db: AsyncSession):
        """Initialize recorder.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def record(
        self,
        survey_id: int,
        respondent_info: Optional[RespondentInfo],
        raw_answers: Optional[dict[str, Any]],
        metadata: Optional[RequestMetadata] = None,
        profile: SubmissionProfile = SURVEY_SCOPED,
    ) -> RecordedResponse:
        """Validate and store one submission.

        Flow:
        1. Require an answers payload
        2. Load survey, require it to be active
        3. Validate answers (first failing question aborts everything)
        4. Resolve respondent (upsert by email, or new anonymous row)
        5. Insert the response with request metadata
        6. Atomically increment the survey's response counter
        7. Commit

        Args:
            survey_id: Survey being answered
            respondent_info: Optional respondent identity
            raw_answers: Answers keyed by question id
            metadata: Captured request metadata
            profile: Entry-point validation settings

        Returns:
            RecordedResponse with the new response and respondent ids

        Raises:
            ValidationError: Missing payload or a rejected answer
            NotFoundError: Survey does not exist
            NotActiveError: Survey is not accepting responses
        """
        if raw_answers is None:
            raise ValidationError("Answers are required")

        survey = await self.db.get(Survey, survey_id)
        if survey is None:
            raise NotFoundError("Survey not found")

        if not survey.is_active:
            logger.info(
                f"Submission to inactive survey refused (status={survey.status})",
                extra={"survey_id": survey_id}
            )
            raise NotActiveError()

        validated = AnswerValidator.validate_submission(
            survey.question_list(), raw_answers, profile
        )

        metadata = metadata or RequestMetadata()

        try:
            respondent_id = await self._resolve_respondent(respondent_info)

            response = Response(
                survey_id=survey.id,
                respondent_id=respondent_id,
                answers=validated,
                completed_at=utcnow(),
                ip_address=metadata.ip_address,
                user_agent=metadata.user_agent,
            )
            self.db.add(response)
            await self.db.flush()

            await Survey.increment_responses(self.db, survey.id)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Recorded response {response.id} ({len(validated)} answers, profile={profile.name})",
            extra={"survey_id": survey.id, "respondent_id": respondent_id}
        )
        return RecordedResponse(response_id=response.id, respondent_id=respondent_id)

    async def _resolve_respondent(self, info: Optional[RespondentInfo]) -> int:
        """Find or create the respondent for a submission.

        Args:
            info: Respondent identity from the request, if any

        Returns:
            int: Respondent id
        """
        if info is not None and info.email:
            return await Respondent.upsert_by_email(
                self.db,
                email=info.email,
                name=info.name,
                metadata=info.collected_metadata(),
            )

        respondent = await Respondent.create_anonymous(
            self.db,
            name=info.name if info else None,
            metadata=info.collected_metadata() if info else None,
        )
        return respondent.id
