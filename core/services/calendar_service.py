# =============================================================================
# core/services/calendar_service.py - Rehearsal Calendar Feed
# =============================================================================
# Builds the public iCalendar feed for one band:
# 1. Look up the band name (404 if unknown)
# 2. Load rehearsals dated today (UTC) or later, earliest first
# 3. Render one VEVENT per rehearsal
#
# The date filter and ordering are applied again in Python after the query,
# so a past rehearsal can never leak into the feed.
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from pydantic import ValidationError

from app.config import settings
from core.errors import BadRequestError
from core.models.rehearsal import Rehearsal
from core.services.band_service import BandService
from lib.ical import CalendarEvent, render_calendar
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid, sanitize_filename, utc_now

logger = logging.getLogger(__name__)


@dataclass
class CalendarFeed:
    band_name: str
    content: str

    @property
    def filename(self) -> str:
        return f"{sanitize_filename(self.band_name)}_rehearsals.ics"


def rehearsal_to_event(rehearsal: Rehearsal) -> CalendarEvent:
    return CalendarEvent(
        uid=f"{rehearsal.id}@{settings.CALENDAR_UID_DOMAIN}",
        start_date=rehearsal.rehearsal_date,
        start_time=rehearsal.start_time,
        summary=rehearsal.name,
        location=rehearsal.location,
        description=rehearsal.description,
        status="CONFIRMED" if rehearsal.is_confirmed else "TENTATIVE",
    )


def upcoming(rehearsals: list[Rehearsal], today: date) -> list[Rehearsal]:
    """Rehearsals on or after `today`, ordered by date then start time."""
    future = [r for r in rehearsals if r.rehearsal_date >= today]
    return sorted(
        future,
        key=lambda r: (r.rehearsal_date, r.start_time is not None, r.start_time or datetime.min.time()),
    )


class CalendarService:
    """Service for calendar exports."""

    @staticmethod
    def fetch_rehearsals(band_id: str, since: date) -> list[Rehearsal]:
        """
        Load a band's rehearsals dated `since` or later.

        Rows that fail validation are skipped with a warning.
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("rehearsals")
                .select("*")
                .eq("band_id", band_id)
                .gte("rehearsal_date", since.isoformat())
                .order("rehearsal_date", desc=False)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch rehearsals for band {band_id}: {e}")
            raise SupabaseClientError(
                message=f"Failed to fetch rehearsals: {e}",
                code="FETCH_REHEARSALS_FAILED",
                details={"band_id": band_id},
            )

        rehearsals = []
        for row in response.data or []:
            try:
                rehearsals.append(Rehearsal.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed rehearsal {row.get('id')}: {e}")
        return rehearsals

    @staticmethod
    def build_feed(
        band_id: str | UUID | None,
        now: datetime | None = None,
    ) -> CalendarFeed:
        """
        Build the iCalendar feed for a band.

        Args:
            band_id: Band to export
            now: Override for the current UTC time (used for DTSTAMP and "today")

        Raises:
            BadRequestError: If band_id is missing
            NotFoundError: If the band doesn't exist
        """
        if not band_id:
            raise BadRequestError("Band ID is required", code="MISSING_BAND_ID")

        band_id_str = normalize_uuid(band_id)
        now = now or utc_now()
        today = now.date()

        band = BandService.get_band(band_id_str, columns="name")
        band_name = band["name"]

        rehearsals = upcoming(CalendarService.fetch_rehearsals(band_id_str, today), today)
        content = render_calendar(
            name=f"{band_name} - Rehearsals",
            description=f"Rehearsal schedule for {band_name}",
            events=[rehearsal_to_event(r) for r in rehearsals],
            stamp=now,
        )

        logger.info(f"Built calendar feed for band {band_id_str} with {len(rehearsals)} events")
        return CalendarFeed(band_name=band_name, content=content)
