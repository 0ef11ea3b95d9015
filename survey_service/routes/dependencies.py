"""Request-level helpers shared by the API routers."""

from typing import Optional

from fastapi import Query, Request

from survey_service.config import get_settings
from survey_service.schemas.pagination import PageParams
from survey_service.schemas.response import RequestMetadata


def page_params(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
) -> PageParams:
    """Pagination query parameters; `limit` defaults to and is capped by settings."""
    settings = get_settings()
    if limit is None:
        limit = settings.default_page_size
    return PageParams(page=page, limit=min(limit, settings.max_page_size))


def client_ip(request: Request) -> Optional[str]:
    """Originating client address.

    Prefers the first hop of X-Forwarded-For, then X-Real-IP, then the
    socket peer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else None


def request_metadata(request: Request) -> RequestMetadata:
    return RequestMetadata(
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
