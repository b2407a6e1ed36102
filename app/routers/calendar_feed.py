# =============================================================================
# app/routers/calendar_feed.py - Rehearsal Calendar Feed
# =============================================================================
# Public iCalendar export. Calendar apps subscribe with GET; the web client
# calls the same handler with POST.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import Response

from app.exceptions import CORS_HEADERS
from core.services.calendar_service import CalendarService

router = APIRouter()


@router.api_route("/calendar-feed", methods=["GET", "POST"], response_class=Response)
def calendar_feed(
    bandId: Annotated[str | None, Query(description="Band UUID")] = None,
):
    """
    Return the band's upcoming rehearsals as text/calendar.

    Rehearsals before today (UTC) are never included.
    """
    feed = CalendarService.build_feed(bandId)

    return Response(
        content=feed.content,
        media_type="text/calendar; charset=utf-8",
        headers={
            **CORS_HEADERS,
            "Content-Disposition": f'inline; filename="{feed.filename}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )
