# =============================================================================
# core/models/song.py - Song Suggestion Schemas
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class SuggestionStatus(str, Enum):
    SUGGESTED = "suggested"
    IN_REHEARSAL = "in_rehearsal"
    PRACTICED = "practiced"


class SongSuggestion(BaseModel):
    """A proposed track tied to a band and to the member who suggested it."""
    model_config = ConfigDict(extra="ignore")

    id: str
    band_id: str
    suggested_by: str
    spotify_track_id: str | None = None
    title: str | None = None
    artist: str | None = None
    status: SuggestionStatus | None = None
    created_at: datetime | None = None


class DeleteSuggestionRequest(BaseModel):
    """Body for POST /delete-song-suggestion."""
    song_id: str | None = None


class DeleteSuggestionResponse(BaseModel):
    success: bool = True
