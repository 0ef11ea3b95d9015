"""Database models and session management.

This package contains all SQLAlchemy ORM models and database utilities.
"""

from survey_service.models.database import (
    Base,
    get_engine,
    get_session_factory,
    configure_engine,
    init_models,
    get_db,
)
from survey_service.models.user import User
from survey_service.models.survey import Survey
from survey_service.models.respondent import Respondent
from survey_service.models.response import Response
from survey_service.models.template import Template

__all__ = [
    "Base",
    "get_engine",
    "get_session_factory",
    "configure_engine",
    "init_models",
    "get_db",
    "User",
    "Survey",
    "Respondent",
    "Response",
    "Template",
]
