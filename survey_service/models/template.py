"""Template model for reusable question sets."""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Index,
    String,
    Text,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    update,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from survey_service.models.database import Base
from survey_service.models.user import utcnow


class Template(Base):
    """Model for survey templates.

    Built-in templates are seeded from YAML at startup and have no creator.

    Attributes:
        id: Template slug (primary key)
        title: Template title
        description: Template description
        type: Pre-Purchase or Post-Purchase
        questions: Embedded question definitions
        features: Feature bullet points
        time: Estimated completion time
        usage_count: Times the template has been used
        builtin: Whether the template ships with the service
        created_by: Creating user, NULL for built-ins
    """

    __tablename__ = "templates"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    questions: Mapped[list] = mapped_column(JSON, nullable=False)
    features: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    time: Mapped[str] = mapped_column(String(50), nullable=False)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    builtin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_by: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
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

    __table_args__ = (
        Index("idx_templates_usage", "usage_count"),
    )

    @classmethod
    async def increment_usage(cls, db: AsyncSession, template_id: str) -> bool:
        """Atomically add one to the usage counter.

        Returns:
            bool: False if no template has this id
        """
        result = await db.execute(
            update(cls)
            .where(cls.id == template_id)
            .values(usage_count=cls.usage_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def __repr__(self) -> str:
        return f"<Template(id={self.id}, usage_count={self.usage_count})>"
