"""Health check endpoint for monitoring and deployment verification."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.models.database import get_db
from survey_service.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Verify the application is running and the database answers.

    Returns 503 with `"database": "disconnected"` if `SELECT 1` fails.

    Example response:
        {
            "status": "healthy",
            "database": "connected"
        }
    """
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "error": "Service unavailable - database connection failed",
            },
        )

    logger.debug("Health check passed")
    return {
        "status": "healthy",
        "database": "connected"
    }
