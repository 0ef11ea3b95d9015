"""Pydantic schemas for survey questions.

Questions are embedded in surveys and templates rather than stored on their
own, so these schemas double as the JSON layout of the `questions` columns.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuestionType(str, Enum):
    """Valid question types."""
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    SINGLE_CHOICE = "single-choice"
    MULTIPLE_CHOICE = "multiple-choice"
    RATING = "rating"
    NPS = "nps"


CHOICE_TYPES = frozenset({QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE})
NUMERIC_TYPES = frozenset({QuestionType.RATING, QuestionType.NPS})


class Question(BaseModel):
    """A single survey question.

    Attributes:
        id: Identifier, unique within the parent survey or template
        type: Question type
        question: Display text shown to respondents
        options: Choices for single/multiple-choice questions
        required: Whether a submission must answer this question
    """
    model_config = ConfigDict(use_enum_values=False)

    id: str = Field(..., min_length=1, description="Question identifier")
    type: QuestionType = Field(..., description="Question type")
    question: str = Field(..., min_length=1, description="Question display text")
    options: list[str] = Field(default_factory=list, description="Choice options")
    required: bool = Field(default=False, description="Whether an answer is required")

    @model_validator(mode='after')
    def validate_options(self):
        """Choice questions must declare at least one option."""
        if self.type in CHOICE_TYPES and not self.options:
            raise ValueError(f"Question type {self.type.value} requires options")
        return self

    @property
    def is_choice(self) -> bool:
        return self.type in CHOICE_TYPES

    @property
    def is_numeric(self) -> bool:
        return self.type in NUMERIC_TYPES


def ensure_unique_ids(questions: list[Question]) -> list[Question]:
    """Reject question lists with repeated ids.

    Raises:
        ValueError: If any question id appears more than once
    """
    ids = [q.id for q in questions]
    if len(ids) != len(set(ids)):
        duplicates = sorted({qid for qid in ids if ids.count(qid) > 1})
        raise ValueError(f"Duplicate question IDs found: {duplicates}")
    return questions
