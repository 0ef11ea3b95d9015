"""Survey model.

Questions are embedded in the survey row as a JSON list; the response
counter is only ever changed through the atomic `increment_responses`.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Index,
    String,
    Text,
    Integer,
    DateTime,
    ForeignKey,
    JSON,
    update,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from survey_service.models.database import Base
from survey_service.models.user import utcnow
from survey_service.schemas.question import Question
from survey_service.schemas.survey import SurveyStatus


class Survey(Base):
    """Model for surveys owned by a user.

    Lifecycle: created in draft, published to active (accepting responses),
    unpublished back to draft by the owner.

    Attributes:
        id: Primary key
        user_id: Owning user
        title: Survey title
        description: Optional description
        status: draft, active or completed
        questions: Ordered list of question dicts (see schemas.question.Question)
        responses_count: Number of accepted responses
        created_at: Creation time
        updated_at: Last update timestamp
        published_at: Time of the most recent publish
    """

    __tablename__ = "surveys"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning user"
    )

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SurveyStatus.DRAFT.value,
        comment="draft, active or completed"
    )
    questions: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        comment="Embedded question definitions"
    )
    responses_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Accepted responses, incremented atomically"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("idx_surveys_user_created", "user_id", "created_at"),
    )

    @property
    def is_active(self) -> bool:
        """Whether the survey is accepting responses."""
        return self.status == SurveyStatus.ACTIVE.value

    def question_list(self) -> list[Question]:
        """Parse the embedded questions into schema objects."""
        return [Question.model_validate(q) for q in self.questions]

    def set_questions(self, questions: list[Question]) -> None:
        """Replace the embedded questions."""
        self.questions = [q.model_dump(mode="json") for q in questions]

    def publish(self) -> None:
        self.status = SurveyStatus.ACTIVE.value
        self.published_at = utcnow()

    def unpublish(self) -> None:
        self.status = SurveyStatus.DRAFT.value

    @classmethod
    async def increment_responses(cls, db: AsyncSession, survey_id: int) -> None:
        """Add one to the response counter in a single UPDATE statement.

        The increment happens in the database, so concurrent submissions
        never overwrite each other's counts. `updated_at` tracks content
        edits and is left as it is.
        """
        await db.execute(
            update(cls)
            .where(cls.id == survey_id)
            .values(responses_count=cls.responses_count + 1, updated_at=cls.updated_at)
            .execution_options(synchronize_session=False)
        )

    def __repr__(self) -> str:
        return (
            f"<Survey(id={self.id}, user_id={self.user_id}, "
            f"status={self.status}, responses_count={self.responses_count})>"
        )
