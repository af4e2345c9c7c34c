from fastapi import Query, Request

from shipyard.config import settings
from shipyard.storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def activity_limit(
    limit: int = Query(
        default=settings.ACTIVITY_DEFAULT_LIMIT,
        ge=1,
        le=settings.ACTIVITY_MAX_LIMIT,
        description="Maximum number of activities to return",
    ),
) -> int:
    return limit
