"""Routes package for FastAPI endpoints.

This package contains all API route modules for the survey service.
"""

from survey_service.routes import auth, health, respondents, responses, surveys, templates

__all__ = ["auth", "health", "respondents", "responses", "surveys", "templates"]
