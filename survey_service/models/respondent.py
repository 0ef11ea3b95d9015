"""Respondent model for people who submit survey responses.

Respondents with an email are deduplicated by a unique index on that email;
anonymous respondents get a fresh row on every submission.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from survey_service.models.database import Base
from survey_service.models.user import utcnow


class Respondent(Base):
    """Model for survey respondents.

    Attributes:
        id: Primary key
        email: Optional email (unique when present, stored lowercased)
        name: Optional display name
        metadata_: Free-form metadata (column name "metadata")
        created_at: First submission time
        updated_at: Refreshed on every submission sharing this email
    """

    __tablename__ = "respondents"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    email: Mapped[Optional[str]] = mapped_column(
        String(320),
        nullable=True,
        unique=True,
        index=True,
        comment="Dedupe key; NULL for anonymous respondents"
    )
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    metadata_: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
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

    @classmethod
    async def upsert_by_email(
        cls,
        db: AsyncSession,
        email: str,
        name: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> int:
        """Insert a respondent or update the one holding `email`, atomically.

        Issues a single INSERT ... ON CONFLICT (email) DO UPDATE so that two
        concurrent submissions with the same email resolve to one row. Only
        the fields the caller supplied are overwritten on conflict; the
        update timestamp is always refreshed.

        Args:
            db: Database session
            email: Normalized respondent email
            name: Optional name
            metadata: Optional metadata mapping

        Returns:
            int: Id of the inserted or updated respondent
        """
        table = cls.__table__
        now = utcnow()
        dialect = db.bind.dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert

        stmt = insert(table).values(
            email=email,
            name=name,
            metadata=metadata or {},
            created_at=now,
            updated_at=now,
        )

        changes = {"updated_at": stmt.excluded["updated_at"]}
        if name is not None:
            changes["name"] = stmt.excluded["name"]
        if metadata:
            changes["metadata"] = stmt.excluded["metadata"]

        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.email],
            set_=changes,
        ).returning(table.c.id)

        result = await db.execute(stmt)
        return result.scalar_one()

    @classmethod
    async def create_anonymous(
        cls,
        db: AsyncSession,
        name: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> "Respondent":
        """Always create a new respondent (no dedupe key available)."""
        respondent = cls(name=name, metadata_=metadata or {})
        db.add(respondent)
        await db.flush()
        return respondent

    def __repr__(self) -> str:
        return f"<Respondent(id={self.id}, has_email={self.email is not None})>"
