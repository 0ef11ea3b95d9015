"""Pydantic schemas for survey templates.

Built-in templates are YAML files validated against `TemplateDefinition`;
user-created templates are posted with the same shape.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from survey_service.schemas.question import Question, ensure_unique_ids


class TemplateType(str, Enum):
    PRE_PURCHASE = "Pre-Purchase"
    POST_PURCHASE = "Post-Purchase"


class TemplateDefinition(BaseModel):
    """A reusable set of questions.

    Attributes:
        id: Unique slug (matches YAML filename for built-ins)
        title: Template title
        description: Template description
        type: Template category
        questions: Ordered questions copied into surveys built from it
        features: Short feature bullet points
        time: Estimated completion time (e.g. "3 min")
    """
    id: str = Field(..., min_length=1, description="Template slug")
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    type: TemplateType
    questions: list[Question] = Field(..., min_length=1)
    features: list[str] = Field(default_factory=list)
    time: str = Field(..., min_length=1)

    @field_validator('id')
    @classmethod
    def id_slug(cls, v):
        """Ensure ID is alphanumeric with underscores/hyphens only."""
        if not v.replace('_', '').replace('-', '').isalnum():
            raise ValueError('Template ID must be alphanumeric with underscores/hyphens')
        return v

    @field_validator('questions')
    @classmethod
    def unique_question_ids(cls, v):
        return ensure_unique_ids(v)


class TemplateOut(TemplateDefinition):
    model_config = ConfigDict(from_attributes=True)

    usage_count: int = Field(0, serialization_alias="usageCount")
    builtin: bool = False
