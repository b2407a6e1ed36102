# =============================================================================
# app/routers/songs.py - Song Suggestion Endpoints
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import get_current_user, AuthUser
from core.models.song import DeleteSuggestionRequest, DeleteSuggestionResponse
from core.services.song_service import SongService

router = APIRouter()


@router.post("/delete-song-suggestion", response_model=DeleteSuggestionResponse)
def delete_song_suggestion(
    body: DeleteSuggestionRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete a song suggestion.

    Allowed for the member who suggested it and for admins of its band.
    """
    SongService.delete_suggestion(body.song_id, user.id)
    return DeleteSuggestionResponse(success=True)
