"""Answer validation for survey submissions.

This module checks submitted answers against survey question definitions,
normalizes accepted values, and produces the error message for the first
rejected question.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

from survey_service.errors import ValidationError
from survey_service.schemas.question import Question, QuestionType
from survey_service.logging_config import get_logger

logger = get_logger(__name__)

NPS_MIN = 0
NPS_MAX = 10


@dataclass
class ValidationResult:
    """Result of validating one answer.

    Attributes:
        is_valid: Whether the answer passed validation
        normalized_value: Value to store (None when rejected or unanswered)
        error_message: Error message if validation failed
        answered: False when an optional question was left empty
    """
    is_valid: bool
    normalized_value: Any
    error_message: Optional[str]
    answered: bool = True


@dataclass(frozen=True)
class SubmissionProfile:
    """Entry-point specific validation settings.

    The survey-scoped submission endpoints and the general submission
    endpoint have always enforced different rating bounds. Each endpoint
    passes its own profile so both behaviors are kept.

    Attributes:
        name: Profile name for logging
        rating_min: Lowest accepted rating
        rating_max: Highest accepted rating
        accept_numeric_strings: Whether "4" is accepted (and stored as 4)
            for rating and NPS questions
    """
    name: str
    rating_min: float
    rating_max: float
    accept_numeric_strings: bool = False


# POST /api/surveys/{id}/responses and POST /api/surveys/{id}/public
SURVEY_SCOPED = SubmissionProfile(name="survey-scoped", rating_min=1, rating_max=5)

# POST /api/responses
GENERAL = SubmissionProfile(
    name="general",
    rating_min=0,
    rating_max=5,
    accept_numeric_strings=True,
)


def is_empty_answer(answer: Any) -> bool:
    """Whether an answer counts as missing.

    None, the empty string and empty lists are missing; 0 and False are not.
    """
    if answer is None:
        return True
    if isinstance(answer, str):
        return answer == ""
    if isinstance(answer, (list, tuple)):
        return len(answer) == 0
    return False


def as_number(answer: Any, accept_strings: bool = False) -> Optional[float]:
    """Convert an answer to a finite number, or None if it is not numeric.

    Booleans are not numbers here even though Python treats them as ints.
    Numeric strings are only converted when `accept_strings` is set;
    integral values come back as int.
    """
    if isinstance(answer, bool):
        return None
    if isinstance(answer, (int, float)):
        value = answer
    elif accept_strings and isinstance(answer, str):
        try:
            value = float(answer.strip())
        except ValueError:
            return None
        if value.is_integer():
            value = int(value)
    else:
        return None

    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _accept(value: Any) -> ValidationResult:
    return ValidationResult(is_valid=True, normalized_value=value, error_message=None)


def _reject(message: str) -> ValidationResult:
    return ValidationResult(is_valid=False, normalized_value=None, error_message=message)


def _validate_text(question: Question, answer: Any, profile: SubmissionProfile) -> ValidationResult:
    return _accept(answer)


def _validate_single_choice(question: Question, answer: Any, profile: SubmissionProfile) -> ValidationResult:
    # Exact, case-sensitive match against declared options
    if isinstance(answer, str) and answer in question.options:
        return _accept(answer)
    return _reject(f"Invalid answer for question: {question.question}")


def _validate_multiple_choice(question: Question, answer: Any, profile: SubmissionProfile) -> ValidationResult:
    if not isinstance(answer, list):
        return _reject(f"Invalid answer for question: {question.question}")
    for item in answer:
        if not isinstance(item, str) or item not in question.options:
            return _reject(f"Invalid answer for question: {question.question}")
    return _accept(list(answer))


def _validate_rating(question: Question, answer: Any, profile: SubmissionProfile) -> ValidationResult:
    value = as_number(answer, profile.accept_numeric_strings)
    if value is None or not profile.rating_min <= value <= profile.rating_max:
        return _reject(f"Invalid rating for question: {question.question}")
    return _accept(value)


def _validate_nps(question: Question, answer: Any, profile: SubmissionProfile) -> ValidationResult:
    value = as_number(answer, profile.accept_numeric_strings)
    if value is None or not NPS_MIN <= value <= NPS_MAX:
        return _reject(f"Invalid NPS score for question: {question.question}")
    return _accept(value)


AnswerRule = Callable[[Question, Any, SubmissionProfile], ValidationResult]

# One rule per question type
ANSWER_RULES: dict[QuestionType, AnswerRule] = {
    QuestionType.SHORT_TEXT: _validate_text,
    QuestionType.LONG_TEXT: _validate_text,
    QuestionType.SINGLE_CHOICE: _validate_single_choice,
    QuestionType.MULTIPLE_CHOICE: _validate_multiple_choice,
    QuestionType.RATING: _validate_rating,
    QuestionType.NPS: _validate_nps,
}


class AnswerValidator:
    """Service for validating submitted answers against survey questions."""

    @staticmethod
    def validate(
        question: Question,
        answer: Any,
        profile: SubmissionProfile = SURVEY_SCOPED
    ) -> ValidationResult:
        """Validate one answer against its question.

        Rules, in order:
        1. Required question with a missing answer: rejected
        2. Optional question with a missing answer: valid, not answered
        3. Type-specific rule from ANSWER_RULES

        Args:
            question: Question definition
            answer: Raw submitted answer (None when absent)
            profile: Entry-point validation settings

        Returns:
            ValidationResult with the normalized value if valid

        Example:
            >>> q = Question(id="q1", type="single-choice", question="Happy?", options=["Yes", "No"])
            >>> AnswerValidator.validate(q, "Yes").is_valid
            True
        """
        if is_empty_answer(answer):
            if question.required:
                return _reject(f"Answer required for question: {question.question}")
            return ValidationResult(
                is_valid=True,
                normalized_value=None,
                error_message=None,
                answered=False
            )

        rule = ANSWER_RULES[question.type]
        return rule(question, answer, profile)

    @staticmethod
    def validate_submission(
        questions: list[Question],
        answers: dict[str, Any],
        profile: SubmissionProfile = SURVEY_SCOPED
    ) -> dict[str, Any]:
        """Validate a whole submission in question order.

        Stops at the first rejected question. Keys in `answers` that do not
        belong to any question are dropped.

        Args:
            questions: Survey questions in declared order
            answers: Raw answers keyed by question id
            profile: Entry-point validation settings

        Returns:
            Mapping of question id to normalized answer, for answered questions only

        Raises:
            ValidationError: With the first rejected question's message
        """
        validated: dict[str, Any] = {}

        for question in questions:
            result = AnswerValidator.validate(question, answers.get(question.id), profile)

            if not result.is_valid:
                logger.info(
                    f"Submission rejected at question {question.id} "
                    f"({question.type.value}, profile={profile.name})"
                )
                raise ValidationError(result.error_message)

            if result.answered:
                validated[question.id] = result.normalized_value

        ignored = set(answers) - {q.id for q in questions}
        if ignored:
            logger.debug(f"Ignoring answers for unknown questions: {sorted(ignored)}")

        return validated
