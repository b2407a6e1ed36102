# =============================================================================
# app/routers/catalog.py - Spotify Catalog Endpoints
# =============================================================================
# Service-level lookups used by the song search page. Not band-scoped and
# not authenticated beyond the platform gateway.
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import SpotifyDep
from core.models.track import (
    TrackMetadataRequest,
    TrackMetadataResponse,
    TrackSearchRequest,
    TrackSearchResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/spotify-search", response_model=TrackSearchResponse)
def spotify_search(body: TrackSearchRequest, spotify: SpotifyDep):
    """
    Search Spotify for tracks.

    Returns up to `limit` (1-50, default 20) normalized tracks.
    """
    tracks = spotify.search(body.query or "", limit=body.limit)
    return TrackSearchResponse(tracks=tracks)


@router.post("/get-track-metadata", response_model=TrackMetadataResponse)
def get_track_metadata(body: TrackMetadataRequest, spotify: SpotifyDep):
    """
    Fetch one Spotify track by id.

    404 if Spotify does not know the track.
    """
    track = spotify.fetch_by_id(body.trackId or "")
    return TrackMetadataResponse(track=track)
