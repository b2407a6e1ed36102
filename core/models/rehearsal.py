# =============================================================================
# core/models/rehearsal.py - Rehearsal Schemas
# =============================================================================
# Rehearsals are read-only here; they are consumed to build calendar feeds.
# =============================================================================

from datetime import date, time
from enum import Enum

from pydantic import BaseModel, ConfigDict


class RehearsalStatus(str, Enum):
    """
    Lifecycle of a rehearsal.

    Only `completed` is exported as a confirmed calendar event.
    """
    PLANNING = "planning"
    SONGS_SELECTED = "songs_selected"
    COMPLETED = "completed"


class Rehearsal(BaseModel):
    """
    A scheduled band event.

    `status` stays a plain string so an unexpected value from the database
    still renders (as a tentative event) instead of failing the whole feed.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    band_id: str | None = None
    name: str
    rehearsal_date: date
    start_time: time | None = None
    location: str | None = None
    description: str | None = None
    status: str | None = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == RehearsalStatus.COMPLETED.value
