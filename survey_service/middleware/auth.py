"""Bearer token verification for authenticated endpoints.

Owner-only endpoints depend on `get_current_user_id`, which resolves the
`Authorization: Bearer <token>` header to a user id before the route
handler runs.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from survey_service.errors import AuthError
from survey_service.services.security import decode_access_token
from survey_service.logging_config import get_logger

logger = get_logger(__name__)

# auto_error=False so a missing header is reported with our own message
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    """FastAPI dependency returning the authenticated user's id.

    Args:
        request: FastAPI request object (for logging context)
        credentials: Parsed bearer credentials, if any

    Returns:
        int: User id from the verified token

    Raises:
        AuthError: If the header is missing or the token does not verify

    Usage:
        @router.get("/api/surveys")
        async def list_surveys(user_id: int = Depends(get_current_user_id)):
            ...
    """
    client_ip = request.client.host if request.client else "unknown"

    if credentials is None or not credentials.credentials:
        logger.info(f"Missing bearer token from IP: {client_ip}")
        raise AuthError("No token provided")

    try:
        user_id = decode_access_token(credentials.credentials)
    except AuthError as e:
        # Never log the token itself
        logger.warning(
            f"Rejected bearer token from IP: {client_ip} ({e.message})",
            extra={"client_ip": client_ip}
        )
        raise

    request.state.user_id = user_id
    return user_id
