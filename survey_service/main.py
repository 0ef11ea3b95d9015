"""FastAPI application entry point for the survey service.

This module initializes the FastAPI application, sets up logging, creates
tables and seeds built-in templates at startup, registers routers, and maps
exceptions to JSON error responses.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from survey_service.config import get_settings
from survey_service.errors import ServiceError
from survey_service.logging_config import setup_logging, get_logger, request_id_var
from survey_service.models.database import dispose_engine, get_session_factory, init_models
from survey_service.routes import auth, health, respondents, responses, surveys, templates
from survey_service.services.template_loader import get_template_loader, seed_builtin_templates

# Initialize logger (will be configured during startup)
logger = get_logger(__name__)

SERVICE_NAME = "Survey Service"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup:
    - Configure logging
    - Create missing tables
    - Seed built-in templates

    Shutdown:
    - Dispose of the database engine

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    settings = get_settings()
    setup_logging()

    logger.info(
        f"{SERVICE_NAME} starting - "
        f"Environment: {settings.environment}, "
        f"Log Level: {settings.log_level}, "
        f"Database: {settings.database_url.split('@')[-1] if '@' in settings.database_url else 'configured'}"
    )

    await init_models()
    async with get_session_factory()() as db:
        await seed_builtin_templates(db, get_template_loader())

    yield

    logger.info(f"{SERVICE_NAME} shutting down")
    await dispose_engine()


app = FastAPI(
    title=SERVICE_NAME,
    description="Survey creation, response collection and analytics API",
    version=VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log record written during a request with its request id."""
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    # Kept on the request too; the 500 handler runs after this middleware unwinds
    request.state.request_id = request_id
    token = request_id_var.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/")
async def root() -> dict:
    """Root endpoint with basic API information."""
    settings = get_settings()
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "environment": settings.environment,
        "status": "operational"
    }


app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, tags=["Auth"])
app.include_router(surveys.router, tags=["Surveys"])
app.include_router(responses.router, tags=["Responses"])
app.include_router(respondents.router, tags=["Respondents"])
app.include_router(templates.router, tags=["Templates"])


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Map service errors to `{"error": message}` with their status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _first_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters as 400s."""
    message = _first_error_message(exc)
    logger.info(f"Rejected request to {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions.

    Logs all unhandled exceptions and returns a generic error response
    to prevent leaking sensitive information.
    """
    logger.error(
        f"Unhandled exception for {request.method} {request.url.path}: {exc}",
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later."
        },
        headers={"X-Request-ID": getattr(request.state, "request_id", "")},
    )
