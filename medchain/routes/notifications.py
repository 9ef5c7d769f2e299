"""
GET /v1/notifications -- recent events for dashboard polling.

In-process subscribers get events as they happen; HTTP clients poll
this feed instead. Only the most recent events are kept.
"""

from fastapi import APIRouter, Query

from medchain.models.schemas import NotificationEvent
from medchain.notifications import NotificationService

router = APIRouter()


@router.get(
    "/v1/notifications",
    response_model=list[NotificationEvent],
    summary="Recent notifications",
    description="Newest first. Filter by event name and/or a wallet (as patient or doctor).",
    tags=["Notifications"],
)
async def recent_notifications(
    event: str | None = Query(default=None, examples=["nft_report_created"]),
    wallet: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
) -> list[NotificationEvent]:
    return [NotificationEvent(**e) for e in NotificationService.recent(event, wallet, limit)]
