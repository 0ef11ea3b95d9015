"""Unit tests for Pydantic schemas.

Tests question, survey, submission, template and auth payload validation.
"""

import pytest
from pydantic import ValidationError

from survey_service.schemas.auth import UserRegister
from survey_service.schemas.pagination import PageParams, Pagination
from survey_service.schemas.question import Question, QuestionType
from survey_service.schemas.response import GeneralSubmissionRequest, RespondentInfo
from survey_service.schemas.survey import SurveyCreate, SurveyUpdate
from survey_service.schemas.template import TemplateDefinition


def question_data(qid="q1", qtype="short-text", **kwargs) -> dict:
    return {"id": qid, "type": qtype, "question": "What?", **kwargs}


class TestQuestion:
    """Tests for Question schema."""

    def test_defaults(self):
        question = Question(**question_data())
        assert question.options == []
        assert question.required is False
        assert question.type == QuestionType.SHORT_TEXT

    def test_choice_requires_options(self):
        with pytest.raises(ValidationError) as exc_info:
            Question(**question_data(qtype="single-choice"))
        assert "requires options" in str(exc_info.value)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            Question(**question_data(qtype="dropdown"))

    def test_empty_text_rejected(self):
        with pytest.raises(ValidationError):
            Question(id="q1", type="rating", question="")

    def test_type_flags(self):
        assert Question(**question_data(qtype="nps")).is_numeric
        assert Question(**question_data(qtype="multiple-choice", options=["a"])).is_choice
        assert not Question(**question_data()).is_choice


class TestSurveyCreate:
    """Tests for SurveyCreate schema."""

    def test_valid(self):
        survey = SurveyCreate(title="  Feedback  ", questions=[question_data()])
        assert survey.title == "Feedback"
        assert survey.description is None

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            SurveyCreate(title="   ", questions=[question_data()])

    def test_questions_required(self):
        with pytest.raises(ValidationError):
            SurveyCreate(title="Feedback", questions=[])

    def test_duplicate_question_ids_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            SurveyCreate(title="Feedback", questions=[question_data("q1"), question_data("q1")])
        assert "Duplicate question IDs" in str(exc_info.value)

    def test_update_is_partial(self):
        update = SurveyUpdate(title="New title")
        assert update.questions is None
        assert "description" not in update.model_fields_set


class TestRespondentInfo:
    """Tests for respondent identity normalization."""

    def test_email_normalized(self):
        info = RespondentInfo(email="  Jane@Example.COM ")
        assert info.email == "jane@example.com"

    def test_blank_email_is_none(self):
        assert RespondentInfo(email="   ").email is None

    def test_extra_keys_become_metadata(self):
        info = RespondentInfo(name="Jane", company="Acme", metadata={"source": "email"})
        assert info.collected_metadata() == {"company": "Acme", "source": "email"}

    def test_general_request_reads_survey_id_alias(self):
        request = GeneralSubmissionRequest(surveyId=7, answers={"q1": "x"})
        assert request.survey_id == 7


class TestTemplateDefinition:

    def test_valid(self):
        template = TemplateDefinition(
            id="nps_check",
            title="NPS",
            description="Quick NPS",
            type="Post-Purchase",
            questions=[question_data(qtype="nps")],
            time="1 min",
        )
        assert template.features == []

    def test_id_must_be_slug(self):
        with pytest.raises(ValidationError):
            TemplateDefinition(
                id="bad id!",
                title="NPS",
                description="Quick NPS",
                type="Post-Purchase",
                questions=[question_data()],
                time="1 min",
            )

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            TemplateDefinition(
                id="x",
                title="X",
                description="X",
                type="During-Purchase",
                questions=[question_data()],
                time="1 min",
            )


class TestUserRegister:

    def test_email_normalized(self):
        user = UserRegister(email=" Owner@Example.com", password="secret1", name="Owner")
        assert user.email == "owner@example.com"

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError):
            UserRegister(email="owner@example.com", password="12345", name="Owner")

    def test_email_needs_at_sign(self):
        with pytest.raises(ValidationError):
            UserRegister(email="owner.example.com", password="secret1", name="Owner")


class TestPagination:

    def test_offset(self):
        assert PageParams(page=3, limit=20).offset == 40

    def test_build_rounds_pages_up(self):
        pagination = Pagination.build(PageParams(page=1, limit=10), 21)
        assert pagination.total_pages == 3
        assert pagination.model_dump(by_alias=True) == {
            "currentPage": 1,
            "totalPages": 3,
            "totalItems": 21,
            "itemsPerPage": 10,
        }

    def test_empty(self):
        assert Pagination.build(PageParams(), 0).total_pages == 0

    def test_page_must_be_positive(self):
        with pytest.raises(ValidationError):
            PageParams(page=0)
