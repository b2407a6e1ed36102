# =============================================================================
# core/services/song_service.py - Song Suggestion Business Logic
# =============================================================================
# Deleting a suggestion is allowed for the member who suggested it and for
# any admin of the suggestion's band.
#
# The lookup, the role check and the delete are separate calls with no
# transaction around them. A role change landing between the check and the
# delete is not detected.
# =============================================================================

import logging
from uuid import UUID

from core.errors import BadRequestError, ForbiddenError, NotFoundError
from core.models.song import SongSuggestion
from core.services.band_service import BandService
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import is_uuid, normalize_uuid

logger = logging.getLogger(__name__)


class SongService:
    """Service for song suggestion operations."""

    @staticmethod
    def get_suggestion(song_id: str | UUID) -> SongSuggestion:
        """
        Raises:
            NotFoundError: If the suggestion doesn't exist or song_id is not a UUID
        """
        row = SupabaseClient.fetch_song_suggestion(song_id) if is_uuid(song_id) else None
        if not row:
            raise NotFoundError(
                "Song not found",
                code="SONG_NOT_FOUND",
                details={"song_id": normalize_uuid(song_id)},
            )
        return SongSuggestion.model_validate(row)

    @staticmethod
    def can_delete(suggestion: SongSuggestion, user_id: str | UUID) -> bool:
        """Suggester or band admin."""
        if suggestion.suggested_by == normalize_uuid(user_id):
            return True
        return BandService.is_admin(suggestion.band_id, user_id)

    @staticmethod
    def delete_suggestion(song_id: str | None, user_id: str | UUID) -> None:
        """
        Delete a suggestion on behalf of `user_id`.

        Raises:
            BadRequestError: If song_id is missing
            NotFoundError: If the suggestion doesn't exist
            ForbiddenError: If the caller is neither suggester nor band admin
            SupabaseClientError: If the delete fails
        """
        if not song_id:
            raise BadRequestError("Missing song_id", code="MISSING_SONG_ID")

        suggestion = SongService.get_suggestion(song_id)

        if not SongService.can_delete(suggestion, user_id):
            logger.warning(f"User {user_id} may not delete suggestion {song_id}")
            raise ForbiddenError(
                "Forbidden",
                suggestion="Only the member who suggested a song or a band admin can delete it",
                details={"song_id": song_id},
            )

        client = SupabaseClient.get_client()
        try:
            client.table("song_suggestions").delete().eq("id", song_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete suggestion {song_id}: {e}")
            raise SupabaseClientError(
                message=f"Failed to delete song suggestion: {e}",
                code="DELETE_SONG_FAILED",
                details={"song_id": song_id},
            )

        logger.info(f"Deleted suggestion {song_id} (band {suggestion.band_id}) by user {user_id}")
