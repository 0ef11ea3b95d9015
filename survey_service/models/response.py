"""Response model for submitted answer sets.

A response is written once, when a submission passes validation, and is
never updated afterwards.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Index,
    String,
    Integer,
    DateTime,
    ForeignKey,
    JSON,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_service.models.database import Base
from survey_service.models.user import utcnow


class Response(Base):
    """Model for one immutable submitted answer set.

    Attributes:
        id: Primary key
        survey_id: Survey answered (responses are deleted with their survey)
        respondent_id: Respondent who answered
        answers: Mapping of question id to validated answer value
        completed_at: Submission time (UTC)
        ip_address: Client address captured from the request
        user_agent: Client user agent captured from the request
        respondent: Relationship to the Respondent
    """

    __tablename__ = "responses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    survey_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Survey answered"
    )
    respondent_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("respondents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Respondent who answered"
    )

    answers: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        comment="Question id -> validated answer"
    )
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    ip_address: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    respondent: Mapped["Respondent"] = relationship("Respondent", lazy="raise")

    __table_args__ = (
        Index("idx_response_survey_respondent", "survey_id", "respondent_id"),
        Index("idx_response_survey_completed", "survey_id", "completed_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Response(id={self.id}, "
            f"survey_id={self.survey_id}, "
            f"respondent_id={self.respondent_id})>"
        )
