"""Integration tests for database operations.

These tests verify the model layer against a real SQLite database:
- Respondent upsert by email and anonymous creation
- Atomic counters on surveys and templates
- Cascade delete of responses with their survey
"""

import pytest
from sqlalchemy import func, select

from survey_service.models.respondent import Respondent
from survey_service.models.response import Response
from survey_service.models.survey import Survey
from survey_service.models.template import Template


class TestRespondentUpsert:
    """Integration tests for Respondent.upsert_by_email."""

    async def test_same_email_same_row(self, db_session):
        first = await Respondent.upsert_by_email(db_session, "jane@example.com", name="Jane")
        await db_session.commit()
        second = await Respondent.upsert_by_email(db_session, "jane@example.com", name="Jane Doe")
        await db_session.commit()

        assert first == second
        count = await db_session.scalar(select(func.count(Respondent.id)))
        assert count == 1

        respondent = await db_session.get(Respondent, first, populate_existing=True)
        assert respondent.name == "Jane Doe"

    async def test_name_kept_when_not_supplied(self, db_session):
        respondent_id = await Respondent.upsert_by_email(
            db_session, "sam@example.com", name="Sam", metadata={"source": "web"}
        )
        await Respondent.upsert_by_email(db_session, "sam@example.com")
        await db_session.commit()

        respondent = await db_session.get(Respondent, respondent_id, populate_existing=True)
        assert respondent.name == "Sam"
        assert respondent.metadata_ == {"source": "web"}

    async def test_anonymous_always_new(self, db_session):
        first = await Respondent.create_anonymous(db_session, name="Anon")
        second = await Respondent.create_anonymous(db_session, name="Anon")
        await db_session.commit()

        assert first.id != second.id
        assert first.email is None and second.email is None


class TestCounters:
    """Integration tests for atomic counters."""

    async def test_increment_responses(self, db_session, make_user, make_survey, yes_no_questions):
        user = await make_user()
        survey = await make_survey(user, yes_no_questions)

        await Survey.increment_responses(db_session, survey.id)
        await Survey.increment_responses(db_session, survey.id)
        await db_session.commit()

        await db_session.refresh(survey)
        assert survey.responses_count == 2

    async def test_increment_responses_keeps_updated_at(self, db_session, make_user, make_survey, yes_no_questions):
        user = await make_user()
        survey = await make_survey(user, yes_no_questions)
        edited_at = survey.updated_at

        await Survey.increment_responses(db_session, survey.id)
        await db_session.commit()

        await db_session.refresh(survey)
        assert survey.responses_count == 1
        assert survey.updated_at == edited_at

    async def test_increment_usage(self, db_session):
        db_session.add(Template(
            id="t1",
            title="T",
            description="D",
            type="Pre-Purchase",
            questions=[],
            features=[],
            time="1 min",
        ))
        await db_session.commit()

        assert await Template.increment_usage(db_session, "t1") is True
        assert await Template.increment_usage(db_session, "missing") is False
        await db_session.commit()

        template = await db_session.get(Template, "t1", populate_existing=True)
        assert template.usage_count == 1


class TestSurveyModel:
    """Integration tests for Survey lifecycle and relationships."""

    async def test_publish_and_unpublish(self, db_session, make_user, make_survey, yes_no_questions):
        user = await make_user()
        survey = await make_survey(user, yes_no_questions, status="draft")
        assert not survey.is_active
        assert survey.published_at is None

        survey.publish()
        await db_session.commit()
        assert survey.is_active
        assert survey.published_at is not None

        survey.unpublish()
        await db_session.commit()
        assert survey.status == "draft"

    async def test_question_list_round_trip(self, make_user, make_survey, yes_no_questions):
        user = await make_user()
        survey = await make_survey(user, yes_no_questions)

        assert survey.question_list() == yes_no_questions

    async def test_responses_deleted_with_survey(self, db_session, make_user, make_survey, yes_no_questions):
        user = await make_user()
        survey = await make_survey(user, yes_no_questions)
        respondent = await Respondent.create_anonymous(db_session)
        db_session.add(Response(survey_id=survey.id, respondent_id=respondent.id, answers={"q1": "Yes"}))
        await db_session.commit()

        await db_session.delete(survey)
        await db_session.commit()

        count = await db_session.scalar(select(func.count(Response.id)))
        assert count == 0
