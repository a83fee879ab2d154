"""Analytics router: client event ingestion."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from libs.auth.dependencies import get_optional_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    AnalyticsEventCreate,
    AnalyticsTrackResponse,
)
from services.store_service.services import analytics
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post(
    "/events",
    response_model=AnalyticsTrackResponse,
    status_code=status.HTTP_201_CREATED,
)
async def track_event(
    event_in: AnalyticsEventCreate,
    request: Request,
    response: Response,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Record a storefront event. Repeats within an hour are acknowledged only."""
    event, already_tracked = await analytics.track_event(
        db,
        event_in,
        user=current_user,
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )
    if already_tracked:
        response.status_code = status.HTTP_200_OK
    return AnalyticsTrackResponse(event_id=event.id, already_tracked=already_tracked)
