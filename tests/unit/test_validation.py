"""Unit tests for answer validation service.

Tests validation logic for all question types and both submission profiles.
"""

import math

import pytest

from survey_service.errors import ValidationError
from survey_service.schemas.question import Question, QuestionType
from survey_service.services.validation import (
    ANSWER_RULES,
    GENERAL,
    SURVEY_SCOPED,
    AnswerValidator,
    as_number,
    is_empty_answer,
)


def make_question(qtype: str, required: bool = False, options=None, qid: str = "q1", text: str = "Question?") -> Question:
    return Question(id=qid, type=qtype, question=text, options=options or [], required=required)


class TestEmptiness:
    """Tests for what counts as a missing answer."""

    @pytest.mark.parametrize("answer", [None, "", []])
    def test_missing_values(self, answer):
        assert is_empty_answer(answer)

    @pytest.mark.parametrize("answer", [0, 0.0, False, " ", ["x"], "text"])
    def test_present_values(self, answer):
        assert not is_empty_answer(answer)


class TestAsNumber:
    """Tests for numeric coercion."""

    def test_numbers_pass_through(self):
        assert as_number(3) == 3
        assert as_number(2.5) == 2.5

    def test_bool_is_not_numeric(self):
        assert as_number(True) is None
        assert as_number(False) is None

    def test_strings_rejected_by_default(self):
        assert as_number("4") is None

    def test_strings_accepted_when_enabled(self):
        assert as_number("4", accept_strings=True) == 4
        assert isinstance(as_number("4", accept_strings=True), int)
        assert as_number(" 3.5 ", accept_strings=True) == 3.5
        assert as_number("abc", accept_strings=True) is None

    def test_non_finite_rejected(self):
        assert as_number(math.inf) is None
        assert as_number(math.nan) is None
        assert as_number("nan", accept_strings=True) is None


class TestRegistry:

    def test_every_type_has_a_rule(self):
        assert set(ANSWER_RULES) == set(QuestionType)


class TestRequired:
    """Tests for required/optional handling."""

    @pytest.mark.parametrize("answer", [None, "", []])
    def test_required_missing_rejected(self, answer):
        question = make_question("short-text", required=True, text="Your name?")

        result = AnswerValidator.validate(question, answer)
        assert not result.is_valid
        assert result.error_message == "Answer required for question: Your name?"

    def test_optional_missing_is_valid_and_unanswered(self):
        question = make_question("rating")

        result = AnswerValidator.validate(question, None)
        assert result.is_valid
        assert not result.answered
        assert result.normalized_value is None

    def test_optional_missing_skips_type_rules(self):
        """An empty optional choice answer is not checked against options."""
        question = make_question("single-choice", options=["A", "B"])

        assert AnswerValidator.validate(question, "").is_valid

    def test_zero_counts_as_answer(self):
        question = make_question("nps", required=True)

        result = AnswerValidator.validate(question, 0)
        assert result.is_valid
        assert result.answered
        assert result.normalized_value == 0


class TestText:

    def test_any_present_value_accepted(self):
        for qtype in ("short-text", "long-text"):
            question = make_question(qtype, required=True)
            result = AnswerValidator.validate(question, "Hello")
            assert result.is_valid
            assert result.normalized_value == "Hello"


class TestSingleChoice:
    """Tests for single-choice validation."""

    def test_declared_option_accepted(self):
        question = make_question("single-choice", options=["Yes", "No"])

        result = AnswerValidator.validate(question, "Yes")
        assert result.is_valid
        assert result.normalized_value == "Yes"

    def test_membership_is_case_sensitive(self):
        question = make_question("single-choice", options=["Yes", "No"], text="Happy?")

        result = AnswerValidator.validate(question, "yes")
        assert not result.is_valid
        assert result.error_message == "Invalid answer for question: Happy?"

    def test_unknown_option_rejected(self):
        question = make_question("single-choice", options=["Yes", "No"])
        assert not AnswerValidator.validate(question, "Maybe").is_valid

    def test_list_rejected(self):
        question = make_question("single-choice", options=["Yes", "No"])
        assert not AnswerValidator.validate(question, ["Yes"]).is_valid


class TestMultipleChoice:
    """Tests for multiple-choice validation."""

    def test_subset_accepted(self):
        question = make_question("multiple-choice", options=["Red", "Green", "Blue"])

        result = AnswerValidator.validate(question, ["Red", "Blue"])
        assert result.is_valid
        assert result.normalized_value == ["Red", "Blue"]

    def test_non_list_rejected(self):
        question = make_question("multiple-choice", options=["Red", "Green"], text="Colors?")

        result = AnswerValidator.validate(question, "Red")
        assert not result.is_valid
        assert result.error_message == "Invalid answer for question: Colors?"

    def test_any_unknown_element_rejects_all(self):
        question = make_question("multiple-choice", options=["Red", "Green"])
        assert not AnswerValidator.validate(question, ["Red", "Purple"]).is_valid


class TestRating:
    """Tests for rating ranges under each profile."""

    @pytest.mark.parametrize("value", [1, 3, 5, 4.5])
    def test_survey_scoped_in_range(self, value):
        question = make_question("rating")
        assert AnswerValidator.validate(question, value, SURVEY_SCOPED).is_valid

    @pytest.mark.parametrize("value", [0, 6, -1, 5.01])
    def test_survey_scoped_out_of_range(self, value):
        question = make_question("rating", text="Rate us")

        result = AnswerValidator.validate(question, value, SURVEY_SCOPED)
        assert not result.is_valid
        assert result.error_message == "Invalid rating for question: Rate us"

    def test_survey_scoped_rejects_numeric_strings(self):
        question = make_question("rating")
        assert not AnswerValidator.validate(question, "4", SURVEY_SCOPED).is_valid

    def test_general_accepts_zero(self):
        question = make_question("rating")

        result = AnswerValidator.validate(question, 0, GENERAL)
        assert result.is_valid
        assert result.normalized_value == 0

    def test_general_normalizes_numeric_strings(self):
        question = make_question("rating")

        result = AnswerValidator.validate(question, "4", GENERAL)
        assert result.is_valid
        assert result.normalized_value == 4

    def test_general_upper_bound(self):
        question = make_question("rating")
        assert not AnswerValidator.validate(question, 6, GENERAL).is_valid
        assert not AnswerValidator.validate(question, "six", GENERAL).is_valid

    def test_bool_rejected(self):
        question = make_question("rating")
        assert not AnswerValidator.validate(question, True, GENERAL).is_valid


class TestNps:
    """Tests for NPS validation."""

    @pytest.mark.parametrize("value", [0, 7, 10])
    def test_in_range(self, value):
        question = make_question("nps")
        assert AnswerValidator.validate(question, value).is_valid

    @pytest.mark.parametrize("value", [-1, 11, "8"])
    def test_out_of_range_or_string(self, value):
        question = make_question("nps", text="Recommend?")

        result = AnswerValidator.validate(question, value, SURVEY_SCOPED)
        assert not result.is_valid
        assert result.error_message == "Invalid NPS score for question: Recommend?"

    def test_general_accepts_numeric_string(self):
        question = make_question("nps")
        assert AnswerValidator.validate(question, "9", GENERAL).normalized_value == 9


class TestValidateSubmission:
    """Tests for whole-submission validation."""

    def test_returns_answered_questions_only(self):
        questions = [
            make_question("single-choice", required=True, options=["Yes", "No"], qid="q1"),
            make_question("short-text", qid="q2"),
        ]

        validated = AnswerValidator.validate_submission(questions, {"q1": "No"})
        assert validated == {"q1": "No"}

    def test_unknown_keys_dropped(self):
        questions = [make_question("short-text", qid="q1")]

        validated = AnswerValidator.validate_submission(questions, {"q1": "hi", "extra": "x"})
        assert validated == {"q1": "hi"}

    def test_first_failure_in_question_order_wins(self):
        questions = [
            make_question("rating", qid="q1", text="First"),
            make_question("nps", qid="q2", text="Second"),
        ]

        with pytest.raises(ValidationError) as exc_info:
            AnswerValidator.validate_submission(questions, {"q2": 99, "q1": 99})
        assert exc_info.value.message == "Invalid rating for question: First"
        assert exc_info.value.status_code == 400

    def test_missing_required_question(self):
        questions = [make_question("long-text", required=True, qid="q1", text="Comments")]

        with pytest.raises(ValidationError, match="Answer required for question: Comments"):
            AnswerValidator.validate_submission(questions, {})
