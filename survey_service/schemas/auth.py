"""Pydantic schemas for registration, login and user output."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserRegister(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6, description="At least 6 characters")
    name: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class UserLogin(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserOut(BaseModel):
    """User as returned by the API. The password hash is never included."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    company: Optional[str] = None
    job_title: Optional[str] = Field(None, serialization_alias="jobTitle")
    created_at: datetime = Field(serialization_alias="createdAt")
