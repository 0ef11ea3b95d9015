"""User model for survey owners.

Users authenticate with email and password; surveys and templates they
create reference them by id.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Boolean, DateTime, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from survey_service.models.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Model for registered users.

    Attributes:
        id: Primary key
        email: Login email (unique, stored lowercased)
        password_hash: bcrypt hash of the password
        name: Display name
        company: Optional company name
        job_title: Optional job title
        is_active: Whether the account may log in
        created_at: Registration time
        updated_at: Last update timestamp
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        comment="Login email, lowercased"
    )
    password_hash: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="bcrypt password hash"
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    company: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    job_title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

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
    async def get_by_email(cls, db: AsyncSession, email: str) -> Optional["User"]:
        """Look up a user by (normalized) email."""
        result = await db.execute(select(cls).where(cls.email == email.strip().lower()))
        return result.scalar_one_or_none()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, active={self.is_active})>"
